"""Cloudflare Pages API client.

Thin async wrapper around the Cloudflare v4 REST API covering the three
calls a cleanup run needs: listing deployments, deleting one deployment and
reading the project's canonical (live) production deployment.
"""

from types import TracebackType
from typing import Any

import httpx

from pages_cleanup.core.exceptions import CloudflareAPIError
from pages_cleanup.models.deployment import Deployment, Environment
from pages_cleanup.utils.logging import get_logger

DEFAULT_BASE_URL = "https://api.cloudflare.com/client/v4"
# Connection-level retries only; HTTP error responses are not retried
TRANSPORT_RETRIES = 2


class CloudflarePagesClient:
    """Client for a single Cloudflare Pages project.

    Construct one per run and use it as an async context manager so the
    underlying connection pool is closed when the run ends.
    """

    def __init__(
        self,
        account_id: str,
        api_token: str,
        project: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.account_id = account_id
        self.project = project
        self.logger = get_logger("cloudflare")
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {api_token}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport or httpx.AsyncHTTPTransport(retries=TRANSPORT_RETRIES),
        )

    async def __aenter__(self) -> "CloudflarePagesClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    @property
    def _project_path(self) -> str:
        return f"/accounts/{self.account_id}/pages/projects/{self.project}"

    async def list_deployments(self, env: Environment | None = None) -> list[Deployment]:
        """List all deployments of the project, following pagination.

        Args:
            env: Optional server-side environment filter.

        Raises:
            CloudflareAPIError: If a page cannot be fetched.
            DeploymentParseError: If a record lacks id/created_on/environment.
        """
        deployments: list[Deployment] = []
        page = 1

        while True:
            # Page 1 is requested without a page param
            params: dict[str, Any] = {"page": page} if page > 1 else {}
            if env is not None:
                params["env"] = env.value

            body = await self._request("GET", f"{self._project_path}/deployments", params=params)
            records = body.get("result") or []
            deployments.extend(Deployment.from_api(record) for record in records)

            info = body.get("result_info") or {}
            total_pages = info.get("total_pages")
            if not records or not isinstance(total_pages, int) or page >= total_pages:
                break
            page += 1

        self.logger.info(
            "cloudflare.deployments.listed",
            project=self.project,
            environment=env.value if env else "all",
            count=len(deployments),
            pages=page,
        )
        return deployments

    async def delete_deployment(self, deployment_id: str) -> None:
        """Delete one deployment. Irreversible.

        Raises:
            CloudflareAPIError: If Cloudflare refuses or the deployment does not exist.
        """
        await self._request("DELETE", f"{self._project_path}/deployments/{deployment_id}")

    async def get_canonical_deployment_id(self) -> str | None:
        """Return the ID of the deployment currently serving production, if known."""
        body = await self._request("GET", self._project_path)
        result = body.get("result")
        if not isinstance(result, dict):
            return None
        canonical = result.get("canonical_deployment")
        if not isinstance(canonical, dict):
            return None
        deployment_id = canonical.get("id")
        return deployment_id if isinstance(deployment_id, str) and deployment_id else None

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request and return the decoded envelope.

        Raises:
            CloudflareAPIError: On transport failure, non-2xx status or ``success: false``.
        """
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise CloudflareAPIError(f"{method} {url} failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        errors = body.get("errors") if isinstance(body.get("errors"), list) else []
        if response.is_error or body.get("success") is False:
            raise CloudflareAPIError(
                _describe_errors(errors) or response.reason_phrase or "request failed",
                status_code=response.status_code,
                errors=errors,
            )
        return body


def _describe_errors(errors: list[Any]) -> str:
    parts = []
    for error in errors:
        if isinstance(error, dict):
            code = error.get("code")
            message = error.get("message", "")
            parts.append(f"[{code}] {message}" if code is not None else str(message))
        else:
            parts.append(str(error))
    return "; ".join(parts)
