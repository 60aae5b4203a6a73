"""Supabase Storage bucket wrapper for profile and gallery images."""
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)


def is_already_exists_error(error: Exception) -> bool:
    message = str(error).lower()
    return "already exists" in message or "duplicate" in message


class SupabaseStorage:
    def __init__(self, supabase: Client, bucket_name: str, cache_control: str = "3600"):
        self.supabase = supabase
        self.bucket_name = bucket_name
        self.cache_control = cache_control

    def _bucket(self):
        return self.supabase.storage.from_(self.bucket_name)

    def upload_file(self, file_content: bytes, path: str, content_type: str) -> str:
        """Upload without overwriting and return the object's public URL"""
        try:
            self._bucket().upload(
                path,
                file_content,
                file_options={
                    "content-type": content_type,
                    "cache-control": self.cache_control,
                    "upsert": "false"
                }
            )
        except Exception as e:
            logger.error(f"Failed to upload {path} to {self.bucket_name}: {str(e)}")
            raise
        return self.public_url(path)

    def public_url(self, path: str) -> str:
        return self._bucket().get_public_url(path)

    def delete_file(self, path: str) -> bool:
        """Best-effort removal; failures are logged and reported as False"""
        try:
            self._bucket().remove([path])
            return True
        except Exception as e:
            logger.warning(f"Failed to delete {path} from {self.bucket_name}: {str(e)}")
            return False

    def path_from_url(self, url: Optional[str]) -> Optional[str]:
        """Object path inside this bucket for one of its public URLs"""
        if not url:
            return None
        marker = f"/{self.bucket_name}/"
        if marker not in url:
            return None
        path = url.split(marker, 1)[1].split("?", 1)[0]
        return path or None
