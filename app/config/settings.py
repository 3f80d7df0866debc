from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Admin operations and storage cleanup

    # Supabase Storage bucket for project images and avatars
    image_bucket: str = "project-images"
    max_image_size: int = 5 * 1024 * 1024

    # AWS S3 (optional, used for images when fully configured)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "ap-northeast-1"
    s3_bucket_name: Optional[str] = None

    # Contact mail (Resend)
    resend_api_key: Optional[str] = None
    resend_api_url: str = "https://api.resend.com/emails"
    contact_from_email: str = "contact@applifarm.jp"
    contact_to_email: str = "admin@applifarm.jp"

    # App
    app_name: str = "applifarm-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    site_url: str = "http://localhost:3000"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    auth_rate_limit: str = "10/minute"
    contact_rate_limit: str = "5/minute"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def s3_enabled(self) -> bool:
        return all([self.aws_access_key_id, self.aws_secret_access_key, self.s3_bucket_name])

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()
