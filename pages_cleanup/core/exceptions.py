"""Custom exceptions for pages-cleanup."""

from typing import Any


class PagesCleanupError(Exception):
    """Base exception for pages-cleanup."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(PagesCleanupError):
    """Invalid run configuration."""

    pass


class DeploymentParseError(PagesCleanupError):
    """An API record could not be turned into a Deployment."""

    def __init__(self, message: str, deployment_id: str | None = None):
        details = {}
        if deployment_id is not None:
            details["deployment_id"] = deployment_id
        super().__init__(f"Malformed deployment record: {message}", details)


class CloudflareAPIError(PagesCleanupError):
    """The Cloudflare API returned an error response."""

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(
            f"Cloudflare API error ({status_code}): {message}",
            {"status_code": status_code, "errors": errors or []},
        )
        self.status_code = status_code
        self.errors = errors or []


class DeletionFailedError(PagesCleanupError):
    """One or more deployments could not be deleted."""

    def __init__(self, errors: list[Any]):
        super().__init__(
            f"Deletion errors occurred: {len(errors)}",
            {"errors": len(errors)},
        )
        self.errors = errors
