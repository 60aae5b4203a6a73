"""
Core dependencies for route protection and per-request Supabase clients
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from snyklynk.database.supabase_client import SupabaseClient, get_supabase
from snyklynk.modules.auth.service import AuthService
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the auth user behind the bearer token"""
    return auth_service.get_current_user(token)


def get_user_supabase(token: str = Depends(get_current_token)) -> Client:
    """Supabase client carrying the caller's JWT"""
    return SupabaseClient.create_user_client(token)


def is_admin(user_data: dict) -> bool:
    """Admins are flagged with app_metadata.is_admin, which only the service role can set"""
    app_metadata = user_data.get("app_metadata") or {}
    return app_metadata.get("is_admin") is True


def require_admin(user_data: dict = Depends(get_current_user)) -> dict:
    if not is_admin(user_data):
        logger.warning("Non-admin user %s attempted an admin action", user_data.get("id"))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin privileges required."
        )
    return user_data
