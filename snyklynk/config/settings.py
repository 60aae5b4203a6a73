from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for ban/delete of auth users

    # Storage buckets
    profile_pictures_bucket: str = "profile-pictures"
    gallery_pictures_bucket: str = "gallery-pictures"
    max_upload_size_mb: int = 5
    max_gallery_images: int = 5
    storage_cache_control: str = "3600"

    # Registration
    signup_max_attempts: int = 3
    signup_retry_delay_seconds: float = 1.0  # multiplied by the attempt number
    signup_settle_delay_seconds: float = 0.5
    minimum_age: int = 18
    maximum_age: int = 120

    # Admin
    recent_window_days: int = 7
    ban_duration: str = "876000h"  # ~100 years; gotrue has no "forever"

    # Auth
    auth_cache_ttl_seconds: int = 60

    # App
    app_name: str = "snyklynk-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://localhost:5173,http://localhost:5174,http://127.0.0.1:5173"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    auth_rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
