"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FOLLOWUP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Customer Follow-up Tracker API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level for the service.")
    data_root: Path = Field(default=Path("data"), description="Root directory for stored records and exports.")
    export_dir_name: str = Field(default="exports", description="Sub-directory of data_root holding export files.")
    export_file_prefix: str = Field(default="followup_export")
    timezone: Optional[str] = Field(
        default=None,
        description="IANA zone used for reminder times and 'today' (e.g., Asia/Riyadh). System zone when unset.",
    )
    reminder_tag: str = Field(default="call_reminders", description="Tag shared by every reminder job.")
    reminder_max_instances: int = Field(default=2, ge=1)
    reminder_misfire_grace_seconds: int = Field(default=3600, ge=1)
    default_reminder_hour: int = Field(default=9, ge=0, le=23)
    default_reminder_minute: int = Field(default=0, ge=0, le=59)
    notification_title: str = "Follow-up calls due"
    notification_message: str = Field(
        default="You have {count} customer(s) to call today",
        description="Alert body template; {count} is replaced with the number of due customers.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @property
    def export_root(self) -> Path:
        return self.data_root / self.export_dir_name


settings = Settings()
