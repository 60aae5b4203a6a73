from fastapi import APIRouter, Depends, Request
from snyklynk.config import settings
from snyklynk.core.dependencies import require_admin, get_user_supabase
from snyklynk.core.limiter import limiter
from snyklynk.database.supabase_client import get_service_supabase
from snyklynk.modules.admin.schemas import DashboardStats, AdminActionResponse
from snyklynk.modules.admin.service import DashboardService, AdminProfileService
from snyklynk.modules.auth.routes import get_session_auth_service
from snyklynk.modules.auth.schemas import SignInRequest, TokenResponse
from snyklynk.modules.auth.service import AuthService
from snyklynk.modules.profiles.models import ESCORT, TAXI
from snyklynk.modules.profiles.schemas import (
    EscortProfile, TaxiOwnerProfile, ProfilePicture, VerifiedFilter
)
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/admin", tags=["admin"])


def get_dashboard_service(supabase: Client = Depends(get_user_supabase)) -> DashboardService:
    return DashboardService(supabase)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.auth_rate_limit)
async def admin_login(
    request: Request,
    login_data: SignInRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Admin sign in. Users without app_metadata.is_admin are signed out and rejected."""
    return service.admin_login(login_data)


@router.get("/overview", response_model=DashboardStats)
async def overview(
    user_data: Dict = Depends(require_admin),
    service: DashboardService = Depends(get_dashboard_service)
):
    """Registration counts for both profile types"""
    return service.get_stats()


def build_profile_router(profile_type: str, path: str, model) -> APIRouter:
    """Moderation routes (list, detail, verify, ban, delete, gallery) for one profile type"""
    profile_router = APIRouter(prefix=f"/{path}")

    def get_service(
        supabase: Client = Depends(get_user_supabase),
        service_supabase: Client = Depends(get_service_supabase)
    ) -> AdminProfileService:
        return AdminProfileService(supabase, service_supabase, profile_type)

    @profile_router.get("", response_model=List[model])
    async def list_profiles(
        search: str = "",
        verified: VerifiedFilter = "all",
        user_data: Dict = Depends(require_admin),
        service: AdminProfileService = Depends(get_service)
    ):
        """All profiles, filtered by search term and verification status"""
        return service.list_profiles(search=search, verified=verified)

    @profile_router.get("/{profile_id}", response_model=model)
    async def get_profile(
        profile_id: str,
        user_data: Dict = Depends(require_admin),
        service: AdminProfileService = Depends(get_service)
    ):
        return service.get_profile(profile_id)

    @profile_router.post("/{profile_id}/verification", response_model=model)
    async def toggle_verification(
        profile_id: str,
        user_data: Dict = Depends(require_admin),
        service: AdminProfileService = Depends(get_service)
    ):
        """Flip the verified flag"""
        return service.toggle_verification(profile_id)

    @profile_router.post("/{profile_id}/ban", response_model=AdminActionResponse)
    async def ban_profile(
        profile_id: str,
        user_data: Dict = Depends(require_admin),
        service: AdminProfileService = Depends(get_service)
    ):
        """Mark the profile banned and suspend its auth account"""
        return service.set_banned(profile_id, True)

    @profile_router.post("/{profile_id}/unban", response_model=AdminActionResponse)
    async def unban_profile(
        profile_id: str,
        user_data: Dict = Depends(require_admin),
        service: AdminProfileService = Depends(get_service)
    ):
        return service.set_banned(profile_id, False)

    @profile_router.delete("/{profile_id}", response_model=AdminActionResponse)
    async def delete_profile(
        profile_id: str,
        user_data: Dict = Depends(require_admin),
        service: AdminProfileService = Depends(get_service)
    ):
        """Delete the profile (gallery cascades) and its auth account"""
        return service.delete_profile(profile_id)

    @profile_router.get("/{profile_id}/pictures", response_model=List[ProfilePicture])
    async def list_pictures(
        profile_id: str,
        user_data: Dict = Depends(require_admin),
        service: AdminProfileService = Depends(get_service)
    ):
        return service.list_pictures(profile_id)

    return profile_router


router.include_router(build_profile_router(ESCORT, "escorts", EscortProfile))
router.include_router(build_profile_router(TAXI, "taxis", TaxiOwnerProfile))
