from pydantic import BaseModel
from typing import List, Optional

from snyklynk.modules.profiles.schemas import ProfilePicture


class ImageFile(BaseModel):
    """An uploaded file already read into memory"""
    filename: str
    content_type: Optional[str] = None
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


class GalleryUploadResponse(BaseModel):
    pictures: List[ProfilePicture]
    count: int
    max_images: int


class ProfileImageResponse(BaseModel):
    profile_id: str
    profile_image_url: Optional[str] = None
