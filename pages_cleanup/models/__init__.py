"""Data models for pages-cleanup."""

from pages_cleanup.models.deployment import (
    Deployment,
    EnvSelector,
    Environment,
)
from pages_cleanup.models.report import (
    DeletionErrorRecord,
    Report,
    ReportInputs,
    ReportSummary,
    SelectionBucket,
    write_report,
)

__all__ = [
    # Deployment models
    "Deployment",
    "EnvSelector",
    "Environment",
    # Report models
    "DeletionErrorRecord",
    "Report",
    "ReportInputs",
    "ReportSummary",
    "SelectionBucket",
    "write_report",
]
