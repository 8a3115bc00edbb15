"""Selection and run report models."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field

from pages_cleanup.models.deployment import EnvSelector, Environment


class SelectionBucket(BaseModel):
    """Classification of one environment's deployments.

    ``kept_ids`` and ``deleted_ids`` partition the environment's deployments;
    both ``skipped_*`` lists are subsets of ``kept_ids``.
    """

    kept_ids: list[str] = Field(default_factory=list)
    deleted_ids: list[str] = Field(default_factory=list)
    skipped_protected_ids: list[str] = Field(default_factory=list)
    skipped_undeletable_ids: list[str] = Field(default_factory=list)


class ReportInputs(BaseModel):
    """Policy inputs echoed into the report."""

    min_to_keep: int
    max_to_keep: int
    older_than_days: int | None = None
    max_deletes_per_run: int
    fail_on_error: bool


class ReportSummary(BaseModel):
    """Run-level counters summed over all processed environments."""

    considered: int = 0
    kept: int = 0
    deleted: int = 0
    skipped_protected: int = 0
    skipped_undeletable: int = 0
    errors: int = 0


class DeletionErrorRecord(BaseModel):
    """A deployment that could not be deleted."""

    deployment_id: str
    status: int = 0
    message: str
    environment: Environment


class Report(BaseModel):
    """Aggregate result of a cleanup run."""

    project: str
    account_id: str
    environment: EnvSelector
    dry_run: bool
    run_at: datetime
    inputs: ReportInputs

    summary: ReportSummary = Field(default_factory=ReportSummary)
    production: SelectionBucket | None = None
    preview: SelectionBucket | None = None
    errors: list[DeletionErrorRecord] = Field(default_factory=list)

    def attach_bucket(
        self, env: Environment, bucket: SelectionBucket, considered: int
    ) -> None:
        """Store an environment's bucket and add its counts to the summary."""
        setattr(self, env.value, bucket)
        self.summary.considered += considered
        self.summary.kept += len(bucket.kept_ids)
        self.summary.deleted += len(bucket.deleted_ids)
        self.summary.skipped_protected += len(bucket.skipped_protected_ids)
        self.summary.skipped_undeletable += len(bucket.skipped_undeletable_ids)

    def add_error(self, record: DeletionErrorRecord) -> None:
        """Record a failed deletion."""
        self.errors.append(record)
        self.summary.errors = len(self.errors)

    def deleted_ids(self) -> list[str]:
        """Deleted IDs across environments, production first."""
        ids: list[str] = []
        for bucket in (self.production, self.preview):
            if bucket is not None:
                ids.extend(bucket.deleted_ids)
        return ids


def write_report(report: Report, path: str | Path) -> Path:
    """Write the report as indented JSON and return the path written."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    return target
