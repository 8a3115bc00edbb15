"""Run configuration using pydantic-settings."""

from typing import Any, Literal

from dotenv import load_dotenv
from pydantic import (
    Field,
    SecretStr,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from pages_cleanup.core.exceptions import ConfigurationError
from pages_cleanup.models.deployment import EnvSelector, Environment
from pages_cleanup.utils.logging import get_logger
from pages_cleanup.utils.parsing import parse_bool, parse_int_strict

load_dotenv()

logger = get_logger(__name__)

ENV_SELECTORS = ("all", "production", "preview")


class Settings(BaseSettings):
    """Cleanup settings loaded from ``PAGES_CLEANUP_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PAGES_CLEANUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Cloudflare
    account_id: str = Field(..., min_length=1)
    api_token: SecretStr
    project: str = Field(..., min_length=1)
    api_base_url: str = "https://api.cloudflare.com/client/v4"
    request_timeout: float = Field(default=60.0, gt=0)

    # Retention policy
    environment: EnvSelector = "all"
    min_to_keep: int = Field(default=5, ge=0)
    max_to_keep: int = Field(default=50, ge=0)
    older_than_days: int | None = Field(default=None, ge=0)
    max_deletes_per_run: int = Field(default=50, ge=0)

    # Run behaviour
    dry_run: bool = True
    fail_on_error: bool = True
    report_path: str = "report.json"

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    @field_validator("account_id", "project", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("environment", mode="before")
    @classmethod
    def _normalize_environment(cls, value: Any) -> Any:
        if value is None:
            return "all"
        normalized = str(value).strip().lower() or "all"
        if normalized not in ENV_SELECTORS:
            raise ValueError(f"Invalid environment '{normalized}'")
        return normalized

    @field_validator(
        "min_to_keep", "max_to_keep", "older_than_days", "max_deletes_per_run",
        mode="before",
    )
    @classmethod
    def _parse_int(cls, value: Any, info: ValidationInfo) -> Any:
        default = cls.model_fields[info.field_name].default
        return parse_int_strict(value, default)

    @field_validator("dry_run", "fail_on_error", mode="before")
    @classmethod
    def _parse_bool(cls, value: Any, info: ValidationInfo) -> bool:
        default = cls.model_fields[info.field_name].default
        return parse_bool(value, default)

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _coerce_max_to_keep(self) -> "Settings":
        if self.max_to_keep < self.min_to_keep:
            logger.warning(
                "config.max_to_keep_below_min",
                max_to_keep=self.max_to_keep,
                min_to_keep=self.min_to_keep,
                using=self.min_to_keep,
            )
            self.max_to_keep = self.min_to_keep
        return self

    @property
    def environments(self) -> list[Environment]:
        """Environments processed by this run, in processing order."""
        if self.environment == "all":
            return [Environment.PRODUCTION, Environment.PREVIEW]
        return [Environment(self.environment)]


def load_settings(**overrides: Any) -> Settings:
    """Load and validate settings.

    Raises:
        ConfigurationError: If any input is missing or invalid.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = [
            f"{'.'.join(str(loc) for loc in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigurationError(
            "Invalid configuration: " + "; ".join(problems),
            {"errors": problems},
        ) from e
