from fastapi import APIRouter, Depends, Request
from snyklynk.config import settings
from snyklynk.core.limiter import limiter
from snyklynk.database.supabase_client import get_session_supabase
from snyklynk.modules.profiles.models import ESCORT, TAXI
from snyklynk.modules.registration.email_check import EmailCheckService
from snyklynk.modules.registration.schemas import (
    EscortRegistrationForm, TaxiRegistrationForm, StepValidationResponse,
    EmailCheckRequest, EmailCheckResponse, RegistrationResponse
)
from snyklynk.modules.registration.service import RegistrationService
from supabase import Client

router = APIRouter(prefix="/register", tags=["registration"])


def get_registration_service(supabase: Client = Depends(get_session_supabase)) -> RegistrationService:
    return RegistrationService(supabase)


def get_email_check_service(supabase: Client = Depends(get_session_supabase)) -> EmailCheckService:
    return EmailCheckService(supabase)


@router.post("/email-check", response_model=EmailCheckResponse)
async def check_email(
    body: EmailCheckRequest,
    service: EmailCheckService = Depends(get_email_check_service)
):
    """Best-effort check that the email is not registered yet"""
    return service.check(body.email)


@router.post("/escort/steps/{step}", response_model=StepValidationResponse)
async def validate_escort_step(
    step: int,
    form: EscortRegistrationForm,
    service: RegistrationService = Depends(get_registration_service)
):
    """Validate one wizard step; the wizard advances only when can_advance is true"""
    return service.validate_step(ESCORT, step, form)


@router.post("/taxi/steps/{step}", response_model=StepValidationResponse)
async def validate_taxi_step(
    step: int,
    form: TaxiRegistrationForm,
    service: RegistrationService = Depends(get_registration_service)
):
    return service.validate_step(TAXI, step, form)


@router.post("/escort", response_model=RegistrationResponse, status_code=201)
@limiter.limit(settings.auth_rate_limit)
def register_escort(
    request: Request,
    form: EscortRegistrationForm,
    service: RegistrationService = Depends(get_registration_service)
):
    """Create the auth user and the escort profile. Runs in the threadpool: sign-up waits between retries."""
    return service.register_escort(form)


@router.post("/taxi", response_model=RegistrationResponse, status_code=201)
@limiter.limit(settings.auth_rate_limit)
def register_taxi(
    request: Request,
    form: TaxiRegistrationForm,
    service: RegistrationService = Depends(get_registration_service)
):
    """Create the auth user and the taxi owner profile, linking any pictures uploaded during the wizard"""
    return service.register_taxi(form)
