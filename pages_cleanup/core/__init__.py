"""Core functionality for pages-cleanup."""

from pages_cleanup.core.exceptions import (
    CloudflareAPIError,
    ConfigurationError,
    DeletionFailedError,
    DeploymentParseError,
    PagesCleanupError,
)

__all__ = [
    "CloudflareAPIError",
    "ConfigurationError",
    "DeletionFailedError",
    "DeploymentParseError",
    "PagesCleanupError",
]
