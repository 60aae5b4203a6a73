from fastapi import APIRouter, Depends, Request
from snyklynk.config import settings
from snyklynk.core.dependencies import get_current_token, get_current_user
from snyklynk.core.limiter import limiter
from snyklynk.database.supabase_client import get_service_supabase, get_session_supabase
from snyklynk.modules.auth.schemas import (
    SignInRequest, SignInResponse, ResendConfirmationRequest, MessageResponse
)
from snyklynk.modules.auth.service import AuthService
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_session_auth_service(supabase: Client = Depends(get_session_supabase)) -> AuthService:
    return AuthService(supabase)


def get_admin_auth_service(supabase: Client = Depends(get_service_supabase)) -> AuthService:
    return AuthService(supabase)


@router.post("/signin", response_model=SignInResponse)
@limiter.limit(settings.auth_rate_limit)
async def signin(
    request: Request,
    login_data: SignInRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Sign in and get the page to land on (escort profile, taxi profile or pre-registration)"""
    return service.sign_in(login_data)


@router.post("/resend-confirmation", response_model=MessageResponse)
@limiter.limit(settings.auth_rate_limit)
async def resend_confirmation(
    request: Request,
    body: ResendConfirmationRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Resend the signup confirmation email"""
    service.resend_confirmation(body.email)
    return MessageResponse(message="Confirmation email sent. Please check your inbox.")


@router.post("/signout", response_model=MessageResponse)
async def signout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_admin_auth_service)
):
    """Sign out and revoke the session"""
    service.sign_out(token)
    return MessageResponse(message="Signed out successfully")


@router.get("/session")
async def get_session(current_user: Dict = Depends(get_current_user)):
    """Current authenticated user"""
    return current_user
