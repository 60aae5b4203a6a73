from supabase import Client
from snyklynk.config import settings
from snyklynk.modules.pictures.schemas import ImageFile, GalleryUploadResponse, ProfileImageResponse
from snyklynk.modules.pictures.storage import SupabaseStorage, is_already_exists_error
from snyklynk.modules.profiles.models import PROFILE_PICTURES_TABLE
from snyklynk.modules.profiles.schemas import ProfilePicture
from snyklynk.modules.profiles.service import ProfileService
from typing import List
from fastapi import HTTPException
import os
import time
import uuid
import logging

logger = logging.getLogger(__name__)

RLS_ERROR_MESSAGE = "Authentication error. Please sign out and sign in again, then try uploading the image."


def validate_image_file(image: ImageFile):
    """Size and type limits, checked before anything is sent to storage"""
    if image.size > settings.max_upload_size_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File size must be less than {settings.max_upload_size_mb}MB"
        )
    if not (image.content_type or "").startswith("image/"):
        raise HTTPException(status_code=400, detail="Please select an image file")


def _extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1] or ".jpg"


def _millis() -> int:
    return int(time.time() * 1000)


class GalleryService:
    def __init__(self, supabase: Client, profile_type: str):
        self.supabase = supabase
        self.profile_type = profile_type
        self.profiles = ProfileService(supabase, profile_type)
        self.storage = SupabaseStorage(
            supabase, settings.gallery_pictures_bucket, settings.storage_cache_control
        )

    def _object_path(self, user_id: str, filename: str) -> str:
        return f"{user_id}/{user_id}-{_millis()}-{uuid.uuid4().hex[:6]}{_extension(filename)}"

    def _insert_picture_row(self, profile_id: str, image_url: str, display_order: int) -> str:
        """Insert the metadata row through the RPC, falling back to a direct insert"""
        try:
            result = self.supabase.rpc("insert_profile_picture", {
                "p_profile_id": profile_id,
                "p_profile_type": self.profile_type,
                "p_image_url": image_url,
                "p_display_order": display_order
            }).execute()
            if result.data:
                return result.data
        except Exception as e:
            logger.warning(f"insert_profile_picture failed, falling back to direct insert: {e}")

        result = self.supabase.table(PROFILE_PICTURES_TABLE).insert({
            "profile_id": profile_id,
            "profile_type": self.profile_type,
            "image_url": image_url,
            "display_order": display_order
        }).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to save image")
        return result.data[0]["id"]

    def _upload_one(self, user_id: str, profile_id: str, image: ImageFile, display_order: int) -> ProfilePicture:
        path = self._object_path(user_id, image.filename)
        try:
            image_url = self.storage.upload_file(image.content, path, image.content_type)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to upload image: {str(e)}")

        try:
            picture_id = self._insert_picture_row(profile_id, image_url, display_order)
        except Exception as e:
            self.storage.delete_file(path)
            error_message = e.detail if isinstance(e, HTTPException) else str(e)
            if "row-level security" in error_message or "RLS" in error_message:
                raise HTTPException(status_code=403, detail=RLS_ERROR_MESSAGE)
            logger.error(f"Saving gallery image for {profile_id} failed: {error_message}")
            raise HTTPException(status_code=500, detail=f"Failed to save image: {error_message}")

        logger.info(f"Added gallery image {picture_id} to {self.profile_type} profile {profile_id}")
        return ProfilePicture(
            id=picture_id,
            profile_id=profile_id,
            profile_type=self.profile_type,
            image_url=image_url,
            display_order=display_order
        )

    def upload_images(self, user_id: str, images: List[ImageFile]) -> GalleryUploadResponse:
        """Validate every file, then check the gallery cap, then upload one by one"""
        if not images:
            raise HTTPException(status_code=400, detail="No files selected")
        for image in images:
            validate_image_file(image)

        profile = self.profiles.require_profile_by_user(user_id)
        current = self.profiles.list_pictures(profile.id)
        if len(current) + len(images) > settings.max_gallery_images:
            raise HTTPException(
                status_code=400,
                detail=(
                    f"You can only upload up to {settings.max_gallery_images} images. "
                    f"You currently have {len(current)} image(s)."
                )
            )

        uploaded = []
        for image in images:
            # display_order is the gallery length at upload time
            display_order = len(current) + len(uploaded)
            uploaded.append(self._upload_one(user_id, profile.id, image, display_order))

        return GalleryUploadResponse(
            pictures=current + uploaded,
            count=len(current) + len(uploaded),
            max_images=settings.max_gallery_images
        )

    def delete_image(self, user_id: str, picture_id: str) -> bool:
        profile = self.profiles.require_profile_by_user(user_id)
        try:
            result = self.supabase.table(PROFILE_PICTURES_TABLE)\
                .select("*")\
                .eq("id", picture_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        picture = result.data if result else None
        if not picture or picture.get("profile_id") != profile.id:
            raise HTTPException(status_code=404, detail="Image not found")

        try:
            self.supabase.table(PROFILE_PICTURES_TABLE)\
                .delete()\
                .eq("id", picture_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error removing gallery image {picture_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove image")

        path = self.storage.path_from_url(picture.get("image_url"))
        if path:
            self.storage.delete_file(path)
        logger.info(f"Removed gallery image {picture_id} from {self.profile_type} profile {profile.id}")
        return True


class ProfileImageService:
    def __init__(self, supabase: Client, profile_type: str):
        self.profiles = ProfileService(supabase, profile_type)
        self.storage = SupabaseStorage(
            supabase, settings.profile_pictures_bucket, settings.storage_cache_control
        )

    def upload_image(self, user_id: str, image: ImageFile) -> ProfileImageResponse:
        validate_image_file(image)
        profile = self.profiles.require_profile_by_user(user_id)

        extension = _extension(image.filename)
        path = f"{user_id}/{user_id}-{_millis()}{extension}"
        try:
            try:
                image_url = self.storage.upload_file(image.content, path, image.content_type)
            except Exception as e:
                if not is_already_exists_error(e):
                    raise
                path = f"{user_id}/{user_id}-{_millis()}-{uuid.uuid4().hex[:6]}{extension}"
                image_url = self.storage.upload_file(image.content, path, image.content_type)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Failed to upload image: {str(e)}")

        updated = self.profiles.update_profile(profile.id, {"profile_image_url": image_url})
        return ProfileImageResponse(profile_id=updated.id, profile_image_url=updated.profile_image_url)

    def remove_image(self, user_id: str) -> ProfileImageResponse:
        profile = self.profiles.require_profile_by_user(user_id)
        path = self.storage.path_from_url(profile.profile_image_url)
        if path:
            # The URL may point outside the bucket; clearing the field still goes ahead
            self.storage.delete_file(path)
        updated = self.profiles.update_profile(profile.id, {"profile_image_url": None})
        return ProfileImageResponse(profile_id=updated.id, profile_image_url=None)
