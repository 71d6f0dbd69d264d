"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "IDEA Community"
    debug: bool = False

    # Firebase/GCP
    gcp_project_id: str = ""
    firebase_api_key: str = ""  # Web API key, used for password sign-in
    use_firebase_emulator: bool = False
    firebase_auth_emulator_host: str = "localhost:9099"

    # Firestore
    firestore_emulator_host: str = "localhost:8080"

    # Storage
    gcs_bucket_name: str = ""
    storage_emulator_host: str = "localhost:9199"
    article_images_prefix: str = "article-images"

    # Sessions
    session_ttl_hours: int = 24 * 30

    # Articles
    articles_page_size: int = 6

    # Admin notification (SMTP). Empty host disables delivery.
    smtp_host: str = ""
    smtp_port: int = 465
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_sender: str = "no-reply@idea.org"
    admin_notification_emails_str: str = Field(
        default="", validation_alias="ADMIN_NOTIFICATION_EMAILS"
    )  # Comma-separated admin emails

    # API
    api_prefix: str = "/api"
    # CORS_ORIGINS env var should be comma-separated list of allowed origins
    cors_origins_str: str = "http://localhost:5173"

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def admin_notification_emails(self) -> list[str]:
        """Parse admin notification emails from comma-separated string."""
        if not self.admin_notification_emails_str:
            return []
        return [
            email.strip()
            for email in self.admin_notification_emails_str.split(",")
            if email.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
