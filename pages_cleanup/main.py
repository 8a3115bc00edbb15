"""Command entry point for a cleanup run."""

import asyncio

from pages_cleanup import __version__
from pages_cleanup.config import Settings, load_settings
from pages_cleanup.core.exceptions import ConfigurationError, PagesCleanupError
from pages_cleanup.core.orchestrator import CleanupOrchestrator
from pages_cleanup.models.report import Report
from pages_cleanup.services.cloudflare import CloudflarePagesClient
from pages_cleanup.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


async def run_cleanup(settings: Settings) -> Report:
    """Run one cleanup pass with a client scoped to the run."""
    async with CloudflarePagesClient(
        account_id=settings.account_id,
        api_token=settings.api_token.get_secret_value(),
        project=settings.project,
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
    ) as client:
        orchestrator = CleanupOrchestrator(settings, client)
        return await orchestrator.run()


def main() -> int:
    """Load settings from the environment, run the cleanup and return an exit code."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        configure_logging()
        logger.error("application.invalid_configuration", error=e.message)
        return 1

    configure_logging(settings.log_level, settings.log_format)
    logger.info(
        "application.starting",
        version=__version__,
        project=settings.project,
        environment=settings.environment,
        dry_run=settings.dry_run,
    )

    try:
        asyncio.run(run_cleanup(settings))
    except PagesCleanupError as e:
        logger.error("application.failed", error=e.message, **e.details)
        return 1

    return 0
