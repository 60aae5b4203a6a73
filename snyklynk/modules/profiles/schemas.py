from pydantic import BaseModel, field_validator
from typing import Optional, List, Literal
from datetime import datetime, date

from snyklynk.modules.registration.validation import (
    validate_required, validate_phone, validate_date_of_birth, validate_vehicle_year
)

ProfileType = Literal["escort", "taxi"]
VerifiedFilter = Literal["all", "verified", "unverified"]


def _none_to_list(value):
    return value if value is not None else []


def _none_to_false(value):
    return bool(value) if value is not None else False


def _blank_to_none(value):
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def _raise_if(error: Optional[str]):
    if error:
        raise ValueError(error)


class ProfilePicture(BaseModel):
    id: str
    profile_id: str
    profile_type: ProfileType
    image_url: str
    display_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EscortProfile(BaseModel):
    id: str
    user_id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    location: Optional[str] = None
    languages: List[str] = []
    services: List[str] = []
    hourly_rate: Optional[float] = None
    availability: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    verified: bool = False
    banned: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    coerce_lists = field_validator("languages", "services", mode="before")(_none_to_list)
    coerce_flags = field_validator("verified", "banned", mode="before")(_none_to_false)

    class Config:
        from_attributes = True


class TaxiOwnerProfile(BaseModel):
    id: str
    user_id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    business_name: Optional[str] = None
    license_number: Optional[str] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_year: Optional[int] = None
    vehicle_color: Optional[str] = None
    vehicle_registration: Optional[str] = None
    insurance_provider: Optional[str] = None
    insurance_policy_number: Optional[str] = None
    service_areas: List[str] = []
    hourly_rate: Optional[float] = None
    availability: Optional[str] = None
    profile_image_url: Optional[str] = None
    verified: bool = False
    banned: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    coerce_lists = field_validator("service_areas", mode="before")(_none_to_list)
    coerce_flags = field_validator("verified", "banned", mode="before")(_none_to_false)

    class Config:
        from_attributes = True


class EscortProfileUpdate(BaseModel):
    """Editable fields of an escort's own profile. Unset fields are left alone."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    location: Optional[str] = None
    languages: Optional[List[str]] = None
    services: Optional[List[str]] = None
    hourly_rate: Optional[float] = None
    availability: Optional[str] = None
    bio: Optional[str] = None

    coerce_blanks = field_validator("date_of_birth", "hourly_rate", "availability", "bio", mode="before")(_blank_to_none)
    coerce_lists = field_validator("languages", "services", mode="before")(_none_to_list)

    @field_validator("first_name", "last_name", "gender", "location")
    @classmethod
    def check_required_text(cls, value, info):
        _raise_if(validate_required(value, info.field_name.replace("_", " ").capitalize()))
        return value.strip()

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value):
        _raise_if(validate_phone(value))
        return value

    @field_validator("date_of_birth")
    @classmethod
    def check_date_of_birth(cls, value):
        _raise_if(validate_date_of_birth(value))
        return value


class TaxiOwnerProfileUpdate(BaseModel):
    """Editable fields of a taxi owner's own profile. Unset fields are left alone."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    business_name: Optional[str] = None
    license_number: Optional[str] = None
    vehicle_make: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_year: Optional[int] = None
    vehicle_color: Optional[str] = None
    vehicle_registration: Optional[str] = None
    insurance_provider: Optional[str] = None
    insurance_policy_number: Optional[str] = None
    service_areas: Optional[List[str]] = None
    hourly_rate: Optional[float] = None
    availability: Optional[str] = None

    coerce_blanks = field_validator(
        "business_name", "vehicle_year", "insurance_provider", "insurance_policy_number",
        "hourly_rate", "availability", mode="before"
    )(_blank_to_none)
    coerce_lists = field_validator("service_areas", mode="before")(_none_to_list)

    @field_validator(
        "first_name", "last_name", "license_number", "vehicle_make",
        "vehicle_model", "vehicle_color", "vehicle_registration"
    )
    @classmethod
    def check_required_text(cls, value, info):
        _raise_if(validate_required(value, info.field_name.replace("_", " ").capitalize()))
        return value.strip()

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value):
        _raise_if(validate_phone(value))
        return value

    @field_validator("vehicle_year")
    @classmethod
    def check_vehicle_year(cls, value):
        if value is not None:
            _raise_if(validate_vehicle_year(value))
        return value


class EscortProfileWithGallery(EscortProfile):
    gallery: List[ProfilePicture] = []


class TaxiOwnerProfileWithGallery(TaxiOwnerProfile):
    gallery: List[ProfilePicture] = []


PROFILE_MODELS = {
    "escort": EscortProfile,
    "taxi": TaxiOwnerProfile,
}
