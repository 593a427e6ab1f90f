"""Application configuration management."""

from pydantic import AnyUrl, ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # HH.ru OAuth
    hh_client_id: str
    hh_client_secret: str
    hh_redirect_uri: str
    hh_employer_id: str
    hh_access_token: str | None = Field(
        default=None,
        description="Static bearer token used when no OAuth token is stored",
    )

    # HH.ru API
    hh_api_base: str = "https://api.hh.ru"
    hh_token_url: str = "https://hh.ru/oauth/token"
    hh_user_agent: str = "hiresync/1.0 (hr@example.com)"
    hh_request_timeout: float = 30.0
    hh_max_pages: int = Field(default=20, ge=1)

    # Refusal action lookup inside a negotiation's "actions"
    refusal_action_name: str = "Отказ"
    refusal_template_name: str = "Шаблон быстрого отказа на отклик"

    # Database
    database_url: AnyUrl

    # Background queue
    redis_url: str = "redis://localhost:6379/0"
    queue_enabled: bool = False
    queue_name: str = "hiresync"

    # Issues created from responses
    issue_project_name: str = "Hire"
    issue_author_id: int = 1
    issue_assignee_id: int | None = None

    # Periodic sync
    sync_enabled: bool = True
    sync_interval_minutes: int = Field(default=60, ge=1)
    sync_timezone: str = "Europe/Moscow"

    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
