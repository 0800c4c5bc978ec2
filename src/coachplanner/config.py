from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COACHPLANNER_",
        case_sensitive=False,
    )

    # App
    env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    db_url: str = "sqlite+aiosqlite:///./coachplanner.db"

    # Scheduling policy
    block_hard_conflicts: bool = False  # refuse creates that double-book a coach or room
    admin_roles: list[str] = Field(default=["ADMIN", "ORG_ADMIN", "SUPER_ADMIN"])
    max_batch_instances: int = 366
    max_repeat_weeks: int = 52

    # Notifications
    notify_webhook_url: str = ""
    notify_timeout_seconds: float = 5.0


def get_settings() -> Settings:
    return Settings()
