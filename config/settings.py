"""Application settings using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = "development"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./employee_management.db"
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_echo: bool = False

    # Token signing
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    jwt_expires_hours: int = 24

    # Frontend origin allowed by CORS
    frontend_url: str = "http://localhost:3000"

    # Timezone
    timezone: str = "UTC"

    # Mail server
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    smtp_from: str | None = None

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    backup_dir: str = "backups"

    @property
    def email_enabled(self) -> bool:
        """Whether an SMTP server is configured."""
        return bool(self.smtp_host)

    @property
    def sender_address(self) -> str:
        """Envelope sender for outgoing mail."""
        return self.smtp_from or self.smtp_user or "no-reply@localhost"


settings = Settings()
