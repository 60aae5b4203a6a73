from supabase import Client
from snyklynk.modules.profiles.models import PROFILE_TABLES
from snyklynk.modules.registration.schemas import EmailCheckResponse
import logging

logger = logging.getLogger(__name__)

ALREADY_REGISTERED_MESSAGE = "This email is already registered. Please use a different email or sign in."


class EmailCheckService:
    """
    Best-effort pre-signup check that an email is not already in use.

    Racy by construction: nothing stops a concurrent signup between this check
    and the auth sign-up. Any lookup failure fails open; the database
    constraint is the real guard.
    """

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _exists_in_auth(self, email: str) -> bool:
        try:
            result = self.supabase.rpc("check_email_in_auth", {"p_email": email}).execute()
            return result.data is True
        except Exception as e:
            logger.error(f"Error checking auth.users for email: {e}")
            return False

    def _exists_in_profiles(self, email: str) -> bool:
        for table in PROFILE_TABLES.values():
            try:
                result = self.supabase.table(table)\
                    .select("id")\
                    .eq("email", email)\
                    .maybe_single()\
                    .execute()
            except Exception as e:
                logger.error(f"Error checking {table} for email: {e}")
                continue
            if result and result.data:
                return True
        return False

    def check(self, email: str) -> EmailCheckResponse:
        if not email or "@" not in email:
            # Format errors are reported by validation, not here
            return EmailCheckResponse(is_unique=True)

        normalized = email.strip().lower()
        if self._exists_in_auth(normalized) or self._exists_in_profiles(normalized):
            return EmailCheckResponse(is_unique=False, message=ALREADY_REGISTERED_MESSAGE)
        return EmailCheckResponse(is_unique=True)
