"""Cleanup Orchestrator.

Runs one retention pass over a Cloudflare Pages project: lists deployments
per environment, selects what to delete, deletes up to the per-run cap and
writes a report.
"""

import re
from datetime import datetime

from pages_cleanup.config import Settings
from pages_cleanup.core.active_production import resolve_active_production
from pages_cleanup.core.exceptions import CloudflareAPIError, DeletionFailedError
from pages_cleanup.core.select import select_for_environment
from pages_cleanup.models.deployment import Deployment, Environment
from pages_cleanup.models.report import (
    DeletionErrorRecord,
    Report,
    ReportInputs,
    write_report,
)
from pages_cleanup.services.cloudflare import CloudflarePagesClient
from pages_cleanup.utils.logging import get_logger
from pages_cleanup.utils.parsing import days_ago_utc, error_message, utc_now

STATUS_IN_MESSAGE = re.compile(r"\((\d{3})\)")


def error_status(error: Exception) -> int:
    """HTTP status of a failed call, or 0 when it cannot be derived."""
    if isinstance(error, CloudflareAPIError) and error.status_code:
        return error.status_code
    match = STATUS_IN_MESSAGE.search(error_message(error))
    return int(match.group(1)) if match else 0


class CleanupOrchestrator:
    """Orchestrates a cleanup run.

    Run phases:
    1. listing - fetch deployments for each selected environment
    2. selection - classify deployments with the selection engine
    3. deletion - delete selected deployments (skipped in dry-run)
    4. reporting - write the JSON report and apply the failure policy
    """

    def __init__(self, settings: Settings, client: CloudflarePagesClient):
        self.settings = settings
        self.client = client
        self.logger = get_logger("orchestrator")

    def _init_report(self, run_at: datetime) -> Report:
        settings = self.settings
        return Report(
            project=settings.project,
            account_id=settings.account_id,
            environment=settings.environment,
            dry_run=settings.dry_run,
            run_at=run_at,
            inputs=ReportInputs(
                min_to_keep=settings.min_to_keep,
                max_to_keep=settings.max_to_keep,
                older_than_days=settings.older_than_days,
                max_deletes_per_run=settings.max_deletes_per_run,
                fail_on_error=settings.fail_on_error,
            ),
        )

    async def run(self, now: datetime | None = None) -> Report:
        """Run the cleanup once.

        Args:
            now: Reference time for the age cutoff and ``run_at`` (default: current UTC time).

        Returns:
            The report, which has also been written to ``settings.report_path``.

        Raises:
            CloudflareAPIError: If listing deployments fails.
            DeletionFailedError: If deletions failed and ``fail_on_error`` is set.
        """
        settings = self.settings
        now = now or utc_now()
        envs = settings.environments
        report = self._init_report(now)

        self.logger.info(
            "orchestrator.run.started",
            project=settings.project,
            environments=[env.value for env in envs],
            dry_run=settings.dry_run,
        )

        # Phase 1: listing, filtered server-side per environment
        deployments: dict[Environment, list[Deployment]] = {}
        for env in envs:
            deployments[env] = await self.client.list_deployments(env)

        active_production_id = None
        if Environment.PRODUCTION in envs:
            active_production_id = await resolve_active_production(
                self.client, deployments[Environment.PRODUCTION]
            )

        older_than = None
        if settings.older_than_days is not None:
            older_than = days_ago_utc(settings.older_than_days, now)

        for env in envs:
            # Phase 2: selection
            bucket, considered = select_for_environment(
                env,
                deployments[env],
                active_production_id=active_production_id,
                min_to_keep=settings.min_to_keep,
                max_to_keep=settings.max_to_keep,
                older_than=older_than,
            )
            self.logger.info(
                "orchestrator.selection.completed",
                environment=env.value,
                total=len(deployments[env]),
                considered=considered,
                kept=len(bucket.kept_ids),
                selected_for_deletion=len(bucket.deleted_ids),
                protected=len(bucket.skipped_protected_ids),
                undeletable=len(bucket.skipped_undeletable_ids),
            )

            # Phase 3: deletion, capped per run
            to_delete = bucket.deleted_ids[: settings.max_deletes_per_run]
            if settings.dry_run:
                self.logger.info(
                    "orchestrator.dry_run",
                    environment=env.value,
                    would_delete=len(to_delete),
                    deployment_ids=to_delete,
                )
            else:
                await self._delete_all(report, env, to_delete)

            report.attach_bucket(env, bucket, considered)

        # Phase 4: reporting
        path = write_report(report, settings.report_path)
        self.logger.info(
            "orchestrator.run.completed",
            report_path=str(path),
            considered=report.summary.considered,
            deleted=report.summary.deleted,
            kept=report.summary.kept,
            errors=report.summary.errors,
            deleted_ids=",".join(report.deleted_ids()),
        )

        if report.errors:
            if not settings.fail_on_error:
                self.logger.warning(
                    "orchestrator.deletion_errors_ignored",
                    errors=len(report.errors),
                    reason="fail_on_error is disabled",
                )
                return report
            raise DeletionFailedError(report.errors)

        return report

    async def _delete_all(
        self, report: Report, env: Environment, deployment_ids: list[str]
    ) -> None:
        """Delete deployments one at a time, recording every failure."""
        total = len(deployment_ids)
        for index, deployment_id in enumerate(deployment_ids, start=1):
            try:
                await self.client.delete_deployment(deployment_id)
            except Exception as e:
                self.logger.error(
                    "orchestrator.delete_failed",
                    environment=env.value,
                    deployment_id=deployment_id,
                    error=error_message(e),
                )
                report.add_error(
                    DeletionErrorRecord(
                        deployment_id=deployment_id,
                        status=error_status(e),
                        message=error_message(e),
                        environment=env,
                    )
                )
                continue

            self.logger.info(
                "orchestrator.deleted",
                environment=env.value,
                progress=f"{index}/{total}",
                deployment_id=deployment_id,
            )
