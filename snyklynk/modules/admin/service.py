from supabase import Client
from snyklynk.config import settings
from snyklynk.modules.admin.schemas import DashboardStats, AdminActionResponse
from snyklynk.modules.profiles.models import ESCORT, TAXI, PROFILE_TABLES
from snyklynk.modules.profiles.service import ProfileService
from typing import List, Dict, Any, Optional
from datetime import datetime, timedelta, timezone
from fastapi import HTTPException
from pydantic import TypeAdapter, ValidationError
import logging

logger = logging.getLogger(__name__)

# PostgREST trims trailing zeros from fractional seconds
_TIMESTAMP = TypeAdapter(datetime)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = _TIMESTAMP.validate_python(value)
    except ValidationError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def count_recent(rows: List[Dict[str, Any]], since: datetime) -> int:
    count = 0
    for row in rows:
        created_at = _parse_timestamp(row.get("created_at"))
        if created_at is not None and created_at >= since:
            count += 1
    return count


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _fetch(self, profile_type: str, errors: List[str]) -> List[Dict[str, Any]]:
        table = PROFILE_TABLES[profile_type]
        try:
            result = self.supabase.table(table)\
                .select("id, verified, banned, created_at")\
                .execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error fetching {table} for stats: {e}")
            errors.append(f"{table}: {str(e)}")
            return []

    def get_stats(self, now: Optional[datetime] = None) -> DashboardStats:
        """Counts derived from full scans of both profile tables. A failed table read does not hide the other."""
        errors: List[str] = []
        escorts = self._fetch(ESCORT, errors)
        taxis = self._fetch(TAXI, errors)
        now = now or datetime.now(timezone.utc)
        since = now - timedelta(days=settings.recent_window_days)

        return DashboardStats(
            total_escorts=len(escorts),
            total_taxis=len(taxis),
            verified_escorts=sum(1 for e in escorts if e.get("verified")),
            verified_taxis=sum(1 for t in taxis if t.get("verified")),
            recent_escorts=count_recent(escorts, since),
            recent_taxis=count_recent(taxis, since),
            banned_escorts=sum(1 for e in escorts if e.get("banned")),
            banned_taxis=sum(1 for t in taxis if t.get("banned")),
            recent_window_days=settings.recent_window_days,
            errors=errors
        )


class AdminProfileService:
    """
    Admin moderation of one profile type.

    Ban and delete are two independent remote calls: the profile row first,
    then the auth account through the service-role client. Nothing is rolled
    back when the second call fails; the caller gets a 502 naming the half
    that did happen.
    """

    def __init__(self, supabase: Client, service_supabase: Client, profile_type: str):
        self.profiles = ProfileService(supabase, profile_type)
        self.service_supabase = service_supabase
        self.profile_type = profile_type

    def list_profiles(self, search: str = "", verified: str = "all") -> list:
        return self.profiles.list_profiles(search, verified)

    def get_profile(self, profile_id: str):
        return self.profiles.get_profile(profile_id)

    def toggle_verification(self, profile_id: str):
        return self.profiles.toggle_verification(profile_id)

    def list_pictures(self, profile_id: str):
        return self.profiles.list_pictures_admin(profile_id)

    def set_banned(self, profile_id: str, banned: bool) -> AdminActionResponse:
        profile = self.profiles.set_banned(profile_id, banned)
        action = "banned" if banned else "unbanned"
        try:
            self.service_supabase.auth.admin.update_user_by_id(
                profile.user_id,
                {"ban_duration": settings.ban_duration if banned else "none"}
            )
        except Exception as e:
            logger.error(f"Profile {profile_id} {action} but auth update of user {profile.user_id} failed: {e}")
            raise HTTPException(
                status_code=502,
                detail=f"Profile {action}, but updating the auth account failed: {str(e)}"
            )
        logger.info(f"Auth user {profile.user_id} {action}")
        return AdminActionResponse(
            profile_id=profile_id,
            user_id=profile.user_id,
            message=f"Profile {action}"
        )

    def delete_profile(self, profile_id: str) -> AdminActionResponse:
        profile = self.profiles.delete_profile(profile_id)
        try:
            self.service_supabase.auth.admin.delete_user(profile.user_id)
        except Exception as e:
            logger.error(f"Profile {profile_id} deleted but deleting auth user {profile.user_id} failed: {e}")
            raise HTTPException(
                status_code=502,
                detail=f"Profile deleted, but deleting the auth account failed: {str(e)}"
            )
        logger.info(f"Auth user {profile.user_id} deleted")
        return AdminActionResponse(
            profile_id=profile_id,
            user_id=profile.user_id,
            message="Profile deleted"
        )
