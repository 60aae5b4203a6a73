import hashlib
import time
import logging
from supabase import Client
from snyklynk.modules.auth.schemas import SignInRequest, SignInResponse, TokenResponse
from snyklynk.modules.profiles.models import ESCORT, TAXI, PROFILE_TABLES
from snyklynk.config import settings
from fastapi import HTTPException
from typing import Dict, Any

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_MAX_SIZE = 500

EMAIL_NOT_CONFIRMED_MESSAGE = (
    "Please confirm your email address before signing in. "
    "Check your inbox for the confirmation email."
)


def _cache_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def is_email_not_confirmed_error(error: Exception) -> bool:
    message = str(error).lower()
    return "email not confirmed" in message or "email_not_confirmed" in message


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _sign_in(self, login_data: SignInRequest):
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            error_message = str(e)
            if is_email_not_confirmed_error(e):
                raise HTTPException(
                    status_code=403,
                    detail={"message": EMAIL_NOT_CONFIRMED_MESSAGE, "email_not_confirmed": True}
                )
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            logger.error(f"Sign in failed: {error_message}")
            raise HTTPException(status_code=500, detail=f"Sign in failed: {error_message}")

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid credentials")
        return auth_response

    def resolve_profile_redirect(self, user_id: str) -> str:
        """Where a signed-in user lands: their escort profile, their taxi profile, or the role picker"""
        for profile_type in (ESCORT, TAXI):
            try:
                result = self.supabase.table(PROFILE_TABLES[profile_type])\
                    .select("id")\
                    .eq("user_id", user_id)\
                    .maybe_single()\
                    .execute()
            except Exception as e:
                logger.warning(f"Profile lookup in {PROFILE_TABLES[profile_type]} failed: {e}")
                continue
            if result and result.data:
                return f"/profile/{profile_type}"
        return "/prereg"

    def sign_in(self, login_data: SignInRequest) -> SignInResponse:
        """Sign in a marketplace user and work out which page they belong on"""
        auth_response = self._sign_in(login_data)
        user = auth_response.user
        return SignInResponse(
            access_token=auth_response.session.access_token,
            refresh_token=auth_response.session.refresh_token,
            user_id=user.id,
            email=user.email or login_data.email,
            redirect_to=self.resolve_profile_redirect(user.id)
        )

    def admin_login(self, login_data: SignInRequest) -> TokenResponse:
        """Sign in, then reject (and sign back out) anyone without app_metadata.is_admin"""
        auth_response = self._sign_in(login_data)
        user = auth_response.user
        app_metadata = user.app_metadata or {}
        if app_metadata.get("is_admin") is not True:
            try:
                self.supabase.auth.sign_out()
            except Exception as e:
                logger.warning(f"Sign out of non-admin user {user.id} failed: {e}")
            logger.warning(f"Rejected admin login for non-admin user {user.id}")
            raise HTTPException(status_code=403, detail="Access denied. Admin privileges required.")

        return TokenResponse(
            access_token=auth_response.session.access_token,
            refresh_token=auth_response.session.refresh_token,
            user_id=user.id,
            email=user.email or login_data.email
        )

    def resend_confirmation(self, email: str) -> bool:
        try:
            self.supabase.auth.resend({"type": "signup", "email": email})
            return True
        except Exception as e:
            logger.error(f"Resending confirmation to {email} failed: {e}")
            raise HTTPException(status_code=400, detail=str(e) or "Failed to resend confirmation email")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = _cache_key(token)
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "created_at": user.created_at,
                "updated_at": user.updated_at
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + settings.auth_cache_ttl_seconds)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def sign_out(self, token: str) -> bool:
        """Revoke the token's session. Needs a service-role client."""
        _AUTH_USER_CACHE.pop(_cache_key(token), None)
        try:
            self.supabase.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()
