from fastapi import APIRouter, Depends
from snyklynk.core.dependencies import get_current_user, get_user_supabase
from snyklynk.modules.profiles.models import ESCORT, TAXI
from snyklynk.modules.profiles.schemas import (
    EscortProfile, TaxiOwnerProfile, EscortProfileUpdate, TaxiOwnerProfileUpdate,
    EscortProfileWithGallery, TaxiOwnerProfileWithGallery
)
from snyklynk.modules.profiles.service import ProfileService
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profile", tags=["profiles"])


def get_escort_service(supabase: Client = Depends(get_user_supabase)) -> ProfileService:
    return ProfileService(supabase, ESCORT)


def get_taxi_service(supabase: Client = Depends(get_user_supabase)) -> ProfileService:
    return ProfileService(supabase, TAXI)


def _with_gallery(service: ProfileService, profile, model):
    gallery = service.list_pictures(profile.id)
    return model(**profile.model_dump(), gallery=gallery)


@router.get("/escort", response_model=EscortProfileWithGallery)
async def get_own_escort_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_escort_service)
):
    """The caller's escort profile with its gallery. 404 sends the front-end to /prereg."""
    profile = service.require_profile_by_user(user_data["id"])
    return _with_gallery(service, profile, EscortProfileWithGallery)


@router.patch("/escort", response_model=EscortProfile)
async def update_own_escort_profile(
    body: EscortProfileUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_escort_service)
):
    """Update the edited fields of the caller's escort profile"""
    profile = service.require_profile_by_user(user_data["id"])
    update_data = body.model_dump(mode="json", exclude_unset=True)
    if not update_data:
        return profile
    return service.update_profile(profile.id, update_data)


@router.get("/taxi", response_model=TaxiOwnerProfileWithGallery)
async def get_own_taxi_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_taxi_service)
):
    """The caller's taxi owner profile with its gallery"""
    profile = service.require_profile_by_user(user_data["id"])
    return _with_gallery(service, profile, TaxiOwnerProfileWithGallery)


@router.patch("/taxi", response_model=TaxiOwnerProfile)
async def update_own_taxi_profile(
    body: TaxiOwnerProfileUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_taxi_service)
):
    """Update the edited fields of the caller's taxi owner profile"""
    profile = service.require_profile_by_user(user_data["id"])
    update_data = body.model_dump(mode="json", exclude_unset=True)
    if not update_data:
        return profile
    return service.update_profile(profile.id, update_data)
