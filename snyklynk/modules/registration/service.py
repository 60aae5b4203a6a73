from supabase import Client
from snyklynk.config import settings
from snyklynk.modules.profiles.models import ESCORT, TAXI, PROFILE_PICTURES_TABLE
from snyklynk.modules.profiles.service import ProfileService
from snyklynk.modules.registration.email_check import EmailCheckService
from snyklynk.modules.registration.schemas import (
    EscortRegistrationForm, TaxiRegistrationForm, FieldError,
    StepValidationResponse, RegistrationResponse
)
from snyklynk.modules.registration.validation import (
    ESCORT_STEPS, TAXI_STEPS, ACCOUNT_STEP,
    validate_escort_step, validate_taxi_step, validate_all_steps
)
from typing import Any, Callable, Dict, List, Optional
from fastapi import HTTPException
import time
import logging

logger = logging.getLogger(__name__)

FOREIGN_KEY_VIOLATION = "23503"
CONFIRM_EMAIL_MESSAGE = "Registration successful! Please check your email to confirm your account, then sign in."


def is_foreign_key_error(error: Exception) -> bool:
    """True for the FK violation raised while the new auth user is not yet visible to the profile insert"""
    if getattr(error, "code", None) == FOREIGN_KEY_VIOLATION:
        return True
    message = getattr(error, "message", None) or str(error)
    return "foreign key" in message.lower()


def _availability(days: List[str]) -> Optional[str]:
    return ", ".join(days) if days else None


class RegistrationService:
    """
    Orchestrates the escort and taxi owner signup wizards.

    The supabase client must be a fresh, per-request client: sign-up stores the
    new user's session on it and the profile RPC then runs as that user.
    `sleep` is injectable so the retry backoff can be skipped in tests.
    """

    def __init__(self, supabase: Client, sleep: Callable[[float], None] = time.sleep):
        self.supabase = supabase
        self.sleep = sleep
        self.email_check = EmailCheckService(supabase)

    # Step validation

    def _with_email_check(self, email: Optional[str], errors: List[FieldError]) -> List[FieldError]:
        if any(e.field == "email" for e in errors):
            return errors
        result = self.email_check.check(email or "")
        if not result.is_unique:
            errors.append(FieldError(field="email", message=result.message))
        return errors

    def validate_step(self, profile_type: str, step: int, form) -> StepValidationResponse:
        steps = ESCORT_STEPS if profile_type == ESCORT else TAXI_STEPS
        validator = validate_escort_step if profile_type == ESCORT else validate_taxi_step
        try:
            errors = validator(step, form)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))
        if step == ACCOUNT_STEP:
            errors = self._with_email_check(form.email, errors)

        can_advance = not errors
        next_step = None
        if can_advance and step < len(steps) - 1:
            next_step = step + 1
        return StepValidationResponse(
            step=step,
            step_title=steps[step],
            can_advance=can_advance,
            next_step=next_step,
            errors=errors
        )

    def _check_submission(self, profile_type: str, form):
        errors = validate_all_steps(profile_type, form)
        if errors:
            raise HTTPException(status_code=422, detail=[e.model_dump() for e in errors])
        email_result = self.email_check.check(form.email)
        if not email_result.is_unique:
            raise HTTPException(status_code=409, detail=email_result.message)

    # Submit

    def _sign_up(self, email: str, password: str):
        try:
            auth_response = self.supabase.auth.sign_up({"email": email, "password": password})
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=409, detail="User already exists")
            logger.error(f"Auth sign up failed: {error_message}")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")
        if not auth_response.user:
            raise HTTPException(status_code=500, detail="Failed to create user account")
        return auth_response

    def _create_profile(self, rpc_name: str, params: Dict[str, Any]) -> Any:
        """Call the profile RPC, retrying only foreign-key violations with linear backoff"""
        max_attempts = settings.signup_max_attempts
        for attempt in range(1, max_attempts + 1):
            try:
                result = self.supabase.rpc(rpc_name, params).execute()
                return result.data
            except Exception as e:
                if not is_foreign_key_error(e) or attempt >= max_attempts:
                    raise
                logger.warning(f"{rpc_name} hit a foreign key violation (attempt {attempt}/{max_attempts}), retrying")
                self.sleep(settings.signup_retry_delay_seconds * attempt)

    def _ensure_session(self, auth_response, email: str, password: str):
        """Session from sign-up, or from a password sign-in; None while the email is unconfirmed"""
        if auth_response.session:
            return auth_response.session
        try:
            sign_in = self.supabase.auth.sign_in_with_password({"email": email, "password": password})
            return sign_in.session
        except Exception as e:
            logger.info(f"Sign in after registration not possible yet: {e}")
            return None

    def _register(self, profile_type: str, form, rpc_name: str, params: Dict[str, Any]) -> RegistrationResponse:
        self._check_submission(profile_type, form)

        auth_response = self._sign_up(form.email, form.password)
        user_id = auth_response.user.id
        # Give auth.users a moment before the profile insert references it
        self.sleep(settings.signup_settle_delay_seconds)

        try:
            profile_id = self._create_profile(rpc_name, {"p_user_id": user_id, **params})
        except Exception as e:
            # The auth user stays behind without a profile
            logger.error(f"{rpc_name} failed for auth user {user_id}: {e}")
            raise HTTPException(
                status_code=500,
                detail=getattr(e, "message", None) or str(e) or "An error occurred during registration"
            )
        logger.info(f"Registered {profile_type} profile for auth user {user_id}")

        if profile_type == TAXI:
            profile_id = self._attach_taxi_pictures(user_id, profile_id, form)

        session = self._ensure_session(auth_response, form.email, form.password)
        if session is None:
            return RegistrationResponse(
                user_id=user_id,
                profile_id=profile_id,
                redirect_to="/signin",
                message=CONFIRM_EMAIL_MESSAGE
            )
        return RegistrationResponse(
            user_id=user_id,
            profile_id=profile_id,
            redirect_to=f"/profile/{profile_type}",
            message="Registration successful!",
            access_token=session.access_token,
            refresh_token=session.refresh_token
        )

    def _attach_taxi_pictures(self, user_id: str, profile_id: Optional[str], form: TaxiRegistrationForm) -> Optional[str]:
        """Best-effort: link pictures uploaded during the wizard. Failures never fail the registration."""
        if not form.profile_image_url and not form.gallery_image_urls:
            return profile_id

        profiles = ProfileService(self.supabase, TAXI)
        if not profile_id:
            try:
                profile = profiles.get_profile_by_user(user_id)
                profile_id = profile.id if profile else None
            except HTTPException as e:
                logger.error(f"Error looking up new taxi profile of {user_id}: {e.detail}")
        if not profile_id:
            return None

        if form.profile_image_url:
            try:
                profiles.update_profile(profile_id, {"profile_image_url": form.profile_image_url})
            except HTTPException as e:
                logger.error(f"Error updating profile image: {e.detail}")

        if form.gallery_image_urls:
            rows = [
                {
                    "profile_id": profile_id,
                    "profile_type": TAXI,
                    "image_url": url,
                    "display_order": index
                }
                for index, url in enumerate(form.gallery_image_urls)
            ]
            try:
                self.supabase.table(PROFILE_PICTURES_TABLE).insert(rows).execute()
            except Exception as e:
                logger.error(f"Error saving gallery images: {e}")
        return profile_id

    def register_escort(self, form: EscortRegistrationForm) -> RegistrationResponse:
        params = {
            "p_first_name": form.first_name,
            "p_last_name": form.last_name,
            "p_email": form.email,
            "p_phone": form.phone,
            "p_date_of_birth": form.date_of_birth,
            "p_gender": form.gender,
            "p_location": form.location,
            "p_languages": form.languages,
            "p_services": form.services,
            "p_hourly_rate": form.hourly_rate,
            "p_availability": _availability(form.availability_days),
            "p_bio": form.bio,
        }
        return self._register(ESCORT, form, "create_escort_profile", params)

    def register_taxi(self, form: TaxiRegistrationForm) -> RegistrationResponse:
        params = {
            "p_first_name": form.first_name,
            "p_last_name": form.last_name,
            "p_email": form.email,
            "p_phone": form.phone,
            "p_business_name": form.business_name,
            "p_license_number": form.license_number,
            "p_vehicle_make": form.vehicle_make,
            "p_vehicle_model": form.vehicle_model,
            "p_vehicle_year": form.vehicle_year,
            "p_vehicle_color": form.vehicle_color,
            "p_vehicle_registration": form.vehicle_registration,
            "p_insurance_provider": form.insurance_provider,
            "p_insurance_policy_number": form.insurance_policy_number,
            "p_service_areas": form.service_areas,
            "p_hourly_rate": form.hourly_rate,
            "p_availability": _availability(form.availability_days),
        }
        return self._register(TAXI, form, "create_taxi_owner_profile", params)
