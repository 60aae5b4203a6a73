from fastapi import APIRouter, Depends, UploadFile, File
from snyklynk.core.dependencies import get_current_user, get_user_supabase
from snyklynk.modules.pictures.schemas import ImageFile, GalleryUploadResponse, ProfileImageResponse
from snyklynk.modules.pictures.service import GalleryService, ProfileImageService
from snyklynk.modules.profiles.schemas import ProfileType, ProfilePicture
from snyklynk.modules.profiles.service import ProfileService
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/profile", tags=["pictures"])


async def _read(file: UploadFile) -> ImageFile:
    return ImageFile(
        filename=file.filename or "",
        content_type=file.content_type,
        content=await file.read()
    )


@router.get("/{profile_type}/gallery", response_model=List[ProfilePicture])
async def list_gallery(
    profile_type: ProfileType,
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_user_supabase)
):
    """The caller's gallery, in display order"""
    profiles = ProfileService(supabase, profile_type)
    profile = profiles.require_profile_by_user(user_data["id"])
    return profiles.list_pictures(profile.id)


@router.post("/{profile_type}/gallery", response_model=GalleryUploadResponse, status_code=201)
async def upload_gallery(
    profile_type: ProfileType,
    files: List[UploadFile] = File(...),
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_user_supabase)
):
    """Add pictures to the caller's gallery (image/* only, 5MB each, 5 in total)"""
    images = [await _read(f) for f in files]
    return GalleryService(supabase, profile_type).upload_images(user_data["id"], images)


@router.delete("/{profile_type}/gallery/{picture_id}", status_code=204)
async def delete_gallery_image(
    profile_type: ProfileType,
    picture_id: str,
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_user_supabase)
):
    GalleryService(supabase, profile_type).delete_image(user_data["id"], picture_id)
    return None


@router.post("/{profile_type}/image", response_model=ProfileImageResponse)
async def upload_profile_image(
    profile_type: ProfileType,
    file: UploadFile = File(...),
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_user_supabase)
):
    """Set the caller's main profile picture"""
    image = await _read(file)
    return ProfileImageService(supabase, profile_type).upload_image(user_data["id"], image)


@router.delete("/{profile_type}/image", response_model=ProfileImageResponse)
async def remove_profile_image(
    profile_type: ProfileType,
    user_data: Dict = Depends(get_current_user),
    supabase: Client = Depends(get_user_supabase)
):
    return ProfileImageService(supabase, profile_type).remove_image(user_data["id"])
