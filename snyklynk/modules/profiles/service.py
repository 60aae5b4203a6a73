from supabase import Client
from snyklynk.modules.profiles.models import PROFILE_TABLES, PROFILE_PICTURES_TABLE, ESCORT
from snyklynk.modules.profiles.schemas import PROFILE_MODELS, ProfilePicture
from typing import List, Optional, Dict, Any
from datetime import datetime, timezone
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# Fields the admin search box matches against, per profile type
SEARCH_FIELDS = {
    "escort": ("first_name", "last_name", "email", "phone", "location"),
    "taxi": ("first_name", "last_name", "email", "phone", "business_name", "service_areas"),
}


def _matches_search(profile: Dict[str, Any], term: str, fields) -> bool:
    for field in fields:
        value = profile.get(field)
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = " ".join(str(v) for v in value)
        if term in str(value).lower():
            return True
    return False


def filter_profiles(
    profiles: List[Dict[str, Any]],
    search: str = "",
    verified: str = "all",
    fields=SEARCH_FIELDS[ESCORT]
) -> List[Dict[str, Any]]:
    """Case-insensitive substring search plus tri-state verified filter. Order is preserved."""
    term = (search or "").lower()
    result = []
    for profile in profiles:
        if term and not _matches_search(profile, term, fields):
            continue
        is_verified = bool(profile.get("verified"))
        if verified == "verified" and not is_verified:
            continue
        if verified == "unverified" and is_verified:
            continue
        result.append(profile)
    return result


class ProfileService:
    def __init__(self, supabase: Client, profile_type: str):
        if profile_type not in PROFILE_TABLES:
            raise ValueError(f"Unknown profile type: {profile_type}")
        self.supabase = supabase
        self.profile_type = profile_type
        self.table = PROFILE_TABLES[profile_type]
        self.model = PROFILE_MODELS[profile_type]

    def fetch_all(self) -> List[Dict[str, Any]]:
        """Every row of the profile table, newest first"""
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .order("created_at", desc=True)\
                .execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error fetching {self.table}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to fetch profiles: {str(e)}")

    def list_profiles(self, search: str = "", verified: str = "all") -> list:
        rows = self.fetch_all()
        filtered = filter_profiles(rows, search, verified, SEARCH_FIELDS[self.profile_type])
        return [self.model(**row) for row in filtered]

    def _get_row(self, profile_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .eq("id", profile_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return result.data

    def get_profile(self, profile_id: str):
        return self.model(**self._get_row(profile_id))

    def get_profile_by_user(self, user_id: str):
        """The profile owned by an auth user, or None"""
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .eq("user_id", user_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result or not result.data:
            return None
        return self.model(**result.data)

    def require_profile_by_user(self, user_id: str):
        profile = self.get_profile_by_user(user_id)
        if profile is None:
            raise HTTPException(status_code=404, detail="Profile not found")
        return profile

    def update_profile(self, profile_id: str, update_data: Dict[str, Any]):
        """Field-level update of one row; stamps updated_at"""
        update_data = dict(update_data)
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table(self.table)\
                .update(update_data)\
                .eq("id", profile_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error updating {self.table} {profile_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update profile: {str(e)}")
        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return self.model(**result.data[0])

    def toggle_verification(self, profile_id: str):
        """Flip the verified flag of exactly one profile"""
        current = self._get_row(profile_id)
        new_status = not bool(current.get("verified"))
        profile = self.update_profile(profile_id, {"verified": new_status})
        logger.info(f"{self.table} {profile_id} verified set to {new_status}")
        return profile

    def set_banned(self, profile_id: str, banned: bool):
        profile = self.update_profile(profile_id, {"banned": banned})
        logger.info(f"{self.table} {profile_id} banned set to {banned}")
        return profile

    def delete_profile(self, profile_id: str):
        """Delete the row; its gallery rows cascade in the database"""
        profile = self.get_profile(profile_id)
        try:
            self.supabase.table(self.table)\
                .delete()\
                .eq("id", profile_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting {self.table} {profile_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to delete profile: {str(e)}")
        logger.info(f"Deleted {self.table} {profile_id}")
        return profile

    def list_pictures(self, profile_id: str) -> List[ProfilePicture]:
        """Gallery of a profile, read directly (owner view)"""
        try:
            result = self.supabase.table(PROFILE_PICTURES_TABLE)\
                .select("*")\
                .eq("profile_id", profile_id)\
                .eq("profile_type", self.profile_type)\
                .order("display_order")\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching gallery of {profile_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to fetch gallery: {str(e)}")
        return [ProfilePicture(**row) for row in result.data or []]

    def list_pictures_admin(self, profile_id: str) -> List[ProfilePicture]:
        """Gallery of a profile through the admin RPC, which reads past row-level security"""
        try:
            result = self.supabase.rpc("get_profile_pictures_admin", {
                "p_profile_id": profile_id,
                "p_profile_type": self.profile_type
            }).execute()
        except Exception as e:
            logger.error(f"Error fetching admin gallery of {profile_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to fetch gallery: {str(e)}")
        rows = sorted(result.data or [], key=lambda row: row.get("display_order") or 0)
        return [ProfilePicture(**row) for row in rows]
