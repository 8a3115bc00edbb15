"""Active production deployment resolution."""

from pages_cleanup.core.exceptions import CloudflareAPIError
from pages_cleanup.models.deployment import Deployment, Environment
from pages_cleanup.services.cloudflare import CloudflarePagesClient
from pages_cleanup.utils.logging import get_logger

logger = get_logger(__name__)

SUCCESS_STATUS = "success"


def detect_active_production(deployments: list[Deployment]) -> str | None:
    """Guess the live production deployment from the deployment list.

    Prefers the newest production deployment whose last build stage
    succeeded, then the newest production deployment of any status.
    """
    production = sorted(
        (d for d in deployments if d.environment == Environment.PRODUCTION),
        key=lambda d: d.created_on,
        reverse=True,
    )
    if not production:
        return None
    for deployment in production:
        if deployment.build_status == SUCCESS_STATUS:
            return deployment.id
    return production[0].id


async def resolve_active_production(
    client: CloudflarePagesClient, deployments: list[Deployment]
) -> str | None:
    """Resolve the live production deployment ID.

    Asks Cloudflare for the project's canonical deployment first and falls
    back to :func:`detect_active_production` when it is unavailable.
    """
    try:
        canonical = await client.get_canonical_deployment_id()
    except CloudflareAPIError as e:
        logger.warning(
            "active_production.canonical_unavailable",
            error=e.message,
            status_code=e.status_code,
        )
        canonical = None

    if canonical:
        logger.info("active_production.resolved", source="canonical", deployment_id=canonical)
        return canonical

    heuristic = detect_active_production(deployments)
    logger.info(
        "active_production.resolved",
        source="heuristic",
        deployment_id=heuristic or "unknown",
    )
    return heuristic
