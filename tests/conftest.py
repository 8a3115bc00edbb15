"""Pytest configuration and fixtures."""

import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable

import pytest

from pages_cleanup.config import Settings
from pages_cleanup.models.deployment import Deployment, Environment

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

DeploymentFactory = Callable[..., Deployment]


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep real PAGES_CLEANUP_* variables and .env files out of tests."""
    for key in list(os.environ):
        if key.upper().startswith("PAGES_CLEANUP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for age calculations."""
    return NOW


@pytest.fixture
def make_deployment() -> DeploymentFactory:
    """Factory for deployments created a number of days before NOW."""

    def _make(
        deployment_id: str,
        env: Environment | str = Environment.PRODUCTION,
        days_ago: float = 0,
        aliases: list[str] | None = None,
        branch: str | None = None,
        build_status: str | None = None,
    ) -> Deployment:
        return Deployment(
            id=deployment_id,
            created_on=NOW - timedelta(days=days_ago),
            environment=Environment(env),
            aliases=aliases,
            branch=branch,
            build_status=build_status,
        )

    return _make


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings for a live (non dry-run) cleanup of both environments."""
    return Settings(
        account_id="acc-123",
        api_token="cf-token",
        project="my-site",
        environment="all",
        min_to_keep=1,
        max_to_keep=1,
        dry_run=False,
        fail_on_error=True,
        max_deletes_per_run=50,
        report_path=str(tmp_path / "out" / "report.json"),
    )
