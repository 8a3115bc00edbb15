"""Deployment data models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pages_cleanup.core.exceptions import DeploymentParseError


class Environment(str, Enum):
    """Cloudflare Pages deployment environment."""

    PRODUCTION = "production"
    PREVIEW = "preview"


EnvSelector = Literal["all", "production", "preview"]


def _get_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    return value if isinstance(value, str) else None


def _get_str_list(payload: dict[str, Any], key: str) -> list[str] | None:
    value = payload.get(key)
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return value
    return None


def _get_dict(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


class Deployment(BaseModel):
    """One historical deployment of a Pages project."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    short_id: str | None = None
    created_on: datetime
    environment: Environment
    url: str | None = None
    aliases: list[str] | None = None

    # Flattened from the nested API objects
    branch: str | None = None
    build_status: str | None = None
    production_branch: str | None = None

    @field_validator("created_on")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def has_aliases(self) -> bool:
        """Whether a custom domain or alias is attached (the deployment is pinned)."""
        return bool(self.aliases)

    @classmethod
    def from_api(cls, payload: Any) -> "Deployment":
        """Build a Deployment from a raw Cloudflare API object.

        Optional nested fields of the wrong type are treated as absent.

        Raises:
            DeploymentParseError: If ``id``, ``created_on`` or ``environment``
                is missing or invalid.
        """
        if not isinstance(payload, dict):
            raise DeploymentParseError(f"expected an object, got {type(payload).__name__}")

        deployment_id = _get_str(payload, "id")
        created_on = _get_str(payload, "created_on")
        environment = payload.get("environment")

        missing = []
        if not deployment_id:
            missing.append("id")
        if not created_on:
            missing.append("created_on")
        if environment not in (Environment.PRODUCTION.value, Environment.PREVIEW.value):
            missing.append("environment")
        if missing:
            raise DeploymentParseError(
                f"missing or invalid {', '.join(missing)}", deployment_id
            )

        trigger_metadata = _get_dict(_get_dict(payload, "deployment_trigger"), "metadata")
        latest_stage = _get_dict(payload, "latest_stage")
        source_config = _get_dict(_get_dict(payload, "source"), "config")

        try:
            return cls(
                id=deployment_id,
                short_id=_get_str(payload, "short_id"),
                created_on=created_on,
                environment=environment,
                url=_get_str(payload, "url"),
                aliases=_get_str_list(payload, "aliases"),
                branch=_get_str(trigger_metadata, "branch"),
                build_status=_get_str(latest_stage, "status"),
                production_branch=_get_str(source_config, "production_branch"),
            )
        except ValidationError as e:
            raise DeploymentParseError(
                f"invalid created_on '{created_on}'", deployment_id
            ) from e
