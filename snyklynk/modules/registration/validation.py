"""
Field and wizard-step validation for the registration forms.

Single-field validators return an error message or None. Step validators
return a list of FieldError; a step may only be left when that list is empty.
"""
import re
from datetime import date
from typing import List, Optional, Union

from snyklynk.config import settings
from snyklynk.modules.registration.schemas import (
    FieldError, EscortRegistrationForm, TaxiRegistrationForm
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PHONE_DIGITS = 10
MIN_PASSWORD_LENGTH = 6

ESCORT_STEPS = ["Personal Information", "Contact & Account", "Profile Details"]
TAXI_STEPS = [
    "Personal Information",
    "Contact & Account",
    "Vehicle Information",
    "Additional Details",
    "Pictures",
]

# Steps that collect the account email, which must also pass the uniqueness check
ACCOUNT_STEP = 1


def validate_required(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None or str(value).strip() == "":
        return f"{field_name} is required"
    return None


def validate_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return "Email is required"
    if not EMAIL_PATTERN.match(email):
        return "Please enter a valid email address"
    return None


def validate_phone(phone: Optional[str]) -> Optional[str]:
    if not phone:
        return "Phone number is required"
    digits_only = re.sub(r"\D", "", phone)
    if len(digits_only) < MIN_PHONE_DIGITS:
        return f"Please enter a valid phone number (at least {MIN_PHONE_DIGITS} digits)"
    return None


def validate_password(password: Optional[str]) -> Optional[str]:
    if not password:
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    return None


def calculate_age(born: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


def validate_date_of_birth(
    date_of_birth: Union[str, date, None],
    today: Optional[date] = None
) -> Optional[str]:
    if not date_of_birth:
        return "Date of birth is required"
    if isinstance(date_of_birth, str):
        try:
            date_of_birth = date.fromisoformat(date_of_birth)
        except ValueError:
            return "Please enter a valid date of birth"
    today = today or date.today()
    if date_of_birth > today:
        return "Invalid date of birth"
    age = calculate_age(date_of_birth, today)
    if age < settings.minimum_age:
        return f"You must be at least {settings.minimum_age} years old"
    if age > settings.maximum_age:
        return "Please enter a valid date of birth"
    return None


def validate_vehicle_year(year: Optional[int]) -> Optional[str]:
    if year is None:
        return "Vehicle year is required"
    max_year = date.today().year + 1
    if year < 1900 or year > max_year:
        return f"Vehicle year must be between 1900 and {max_year}"
    return None


def _collect(errors: List[FieldError], field: str, message: Optional[str]):
    if message:
        errors.append(FieldError(field=field, message=message))


def _validate_account(form, errors: List[FieldError]):
    _collect(errors, "email", validate_email(form.email))
    _collect(errors, "phone", validate_phone(form.phone))


def _validate_credentials(form, errors: List[FieldError]):
    _collect(errors, "password", validate_password(form.password))
    if form.password != form.confirm_password:
        _collect(errors, "confirm_password", "Passwords do not match")


def validate_escort_step(step: int, form: EscortRegistrationForm) -> List[FieldError]:
    if step < 0 or step >= len(ESCORT_STEPS):
        raise ValueError(f"Unknown escort registration step {step}")
    errors: List[FieldError] = []
    if step == 0:
        _collect(errors, "first_name", validate_required(form.first_name, "First name"))
        _collect(errors, "last_name", validate_required(form.last_name, "Last name"))
        _collect(errors, "date_of_birth", validate_date_of_birth(form.date_of_birth))
        _collect(errors, "gender", validate_required(form.gender, "Gender"))
    elif step == 1:
        _validate_account(form, errors)
        _collect(errors, "location", validate_required(form.location, "Location"))
        _validate_credentials(form, errors)
    return errors


def validate_taxi_step(step: int, form: TaxiRegistrationForm) -> List[FieldError]:
    if step < 0 or step >= len(TAXI_STEPS):
        raise ValueError(f"Unknown taxi registration step {step}")
    errors: List[FieldError] = []
    if step == 0:
        _collect(errors, "first_name", validate_required(form.first_name, "First name"))
        _collect(errors, "last_name", validate_required(form.last_name, "Last name"))
    elif step == 1:
        _validate_account(form, errors)
        _validate_credentials(form, errors)
    elif step == 2:
        _collect(errors, "license_number", validate_required(form.license_number, "Driver's license number"))
        _collect(errors, "vehicle_make", validate_required(form.vehicle_make, "Vehicle make"))
        _collect(errors, "vehicle_model", validate_required(form.vehicle_model, "Vehicle model"))
        _collect(errors, "vehicle_year", validate_vehicle_year(form.vehicle_year))
        _collect(errors, "vehicle_color", validate_required(form.vehicle_color, "Vehicle color"))
        _collect(errors, "vehicle_registration", validate_required(form.vehicle_registration, "Vehicle registration number"))
    elif step == 4:
        if len(form.gallery_image_urls) > settings.max_gallery_images:
            _collect(errors, "gallery_image_urls", f"You can only upload up to {settings.max_gallery_images} images")
    return errors


def validate_all_steps(profile_type: str, form) -> List[FieldError]:
    """Every step of a wizard, as checked again on final submit"""
    if profile_type == "escort":
        return [e for step in range(len(ESCORT_STEPS)) for e in validate_escort_step(step, form)]
    return [e for step in range(len(TAXI_STEPS)) for e in validate_taxi_step(step, form)]
