"""GitHub REST API client."""

import httpx

from core.config import settings

REPOS_PER_PAGE = 5


class GitHubClient:
    """Thin async client for the GitHub repository listing endpoint.

    Authenticates with the OAuth app's client id/secret pair when both are
    configured; otherwise calls go out unauthenticated.
    """

    def __init__(
        self,
        base_url: str = settings.github_api_url,
        client_id: str = settings.github_client_id,
        client_secret: str = settings.github_client_secret,
        timeout: float = settings.github_timeout_seconds,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._auth = (client_id, client_secret) if client_id and client_secret else None
        self._timeout = timeout
        self._transport = transport

    async def list_repos(self, username: str) -> httpx.Response:
        """Fetch the five oldest-created repositories of ``username``."""
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            return await client.get(
                f"/users/{username}/repos",
                params={
                    "per_page": REPOS_PER_PAGE,
                    "sort": "created",
                    "direction": "asc",
                },
                headers={
                    "Accept": "application/vnd.github+json",
                    "User-Agent": settings.app_name,
                },
                auth=self._auth,
            )
