"""Deployment selection engine.

Decides, for a single environment, which deployments are kept and which are
deleted. Pipeline, in order of precedence for each deployment (newest first):

1. Protected deployments are always kept and recorded as skipped-protected:
   the active production deployment (production only) and any deployment
   with at least one alias attached.
2. The newest ``max(min_to_keep, max_to_keep)`` deployments are kept.
3. Everything else is a candidate and counts towards ``considered``:
   - candidates not strictly older than ``older_than`` are kept;
   - in preview, the newest deployment of a branch is kept and recorded as
     skipped-undeletable, since Cloudflare refuses to delete it;
   - the rest are selected for deletion.

The engine is pure: it never reads the clock and never mutates its inputs.
"""

from collections.abc import Iterable
from datetime import datetime

from pages_cleanup.models.deployment import Deployment, Environment
from pages_cleanup.models.report import SelectionBucket


def is_protected(
    deployment: Deployment,
    env: Environment,
    active_production_id: str | None = None,
) -> bool:
    """Return True if the deployment must never be deleted."""
    if (
        env == Environment.PRODUCTION
        and active_production_id
        and deployment.id == active_production_id
    ):
        return True
    return deployment.has_aliases


def newest_per_branch(deployments: list[Deployment]) -> dict[str, str]:
    """Map each known branch to the ID of its first deployment in ``deployments``.

    ``deployments`` must already be sorted newest first.
    """
    newest: dict[str, str] = {}
    for deployment in deployments:
        if deployment.branch and deployment.branch not in newest:
            newest[deployment.branch] = deployment.id
    return newest


def select_for_environment(
    env: Environment,
    deployments: Iterable[Deployment],
    active_production_id: str | None = None,
    min_to_keep: int = 0,
    max_to_keep: int = 0,
    older_than: datetime | None = None,
) -> tuple[SelectionBucket, int]:
    """Select deployments to keep or delete for one environment.

    Args:
        env: Environment to classify; deployments of other environments are ignored.
        deployments: Unordered deployments, possibly of mixed environments.
        active_production_id: Deployment pinned as live production (production only).
        min_to_keep: Floor of newest deployments to keep.
        max_to_keep: Cap of newest deployments to keep.
        older_than: Only candidates created strictly before this instant are deleted.

    Returns:
        The bucket of IDs and the number of candidates examined beyond the
        retention window, whether or not they ended up deleted.
    """
    # newest -> oldest; sorted() is stable so equal timestamps keep input order
    filtered = sorted(
        (d for d in deployments if d.environment == env),
        key=lambda d: d.created_on,
        reverse=True,
    )

    keep_cut = max(min_to_keep, max_to_keep)
    branch_latest = newest_per_branch(filtered) if env == Environment.PREVIEW else {}

    bucket = SelectionBucket()
    considered = 0

    for position, deployment in enumerate(filtered):
        if is_protected(deployment, env, active_production_id):
            bucket.skipped_protected_ids.append(deployment.id)
            bucket.kept_ids.append(deployment.id)
            continue

        if position < keep_cut:
            bucket.kept_ids.append(deployment.id)
            continue

        considered += 1

        if older_than is not None and deployment.created_on >= older_than:
            bucket.kept_ids.append(deployment.id)
            continue

        if deployment.branch and branch_latest.get(deployment.branch) == deployment.id:
            bucket.skipped_undeletable_ids.append(deployment.id)
            bucket.kept_ids.append(deployment.id)
            continue

        bucket.deleted_ids.append(deployment.id)

    return bucket, considered
