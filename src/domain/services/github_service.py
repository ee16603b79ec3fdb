"""GitHub lookup service: relays a user's recent repositories."""

from typing import Any, Protocol

import httpx
import structlog

from core.exceptions import GitHubProfileNotFoundError, GitHubUnavailableError

logger = structlog.get_logger()


class IGitHubClient(Protocol):
    """Protocol for the outbound GitHub API client."""

    async def list_repos(self, username: str) -> httpx.Response:
        """Fetch the repository listing for ``username``.

        Raises:
            httpx.HTTPError: on transport failure (connect, timeout, protocol)
        """
        ...


class GitHubService:
    """Service layer for the GitHub repository lookup."""

    def __init__(self, client: IGitHubClient) -> None:
        self._client = client

    async def get_repos(self, username: str) -> Any:
        """Return GitHub's JSON body for the user's repositories, unchanged."""
        try:
            response = await self._client.list_repos(username)
        except httpx.HTTPError as e:
            logger.error(
                "github_lookup_failed",
                username=username,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise GitHubUnavailableError(username) from e

        if not response.is_success:
            logger.info(
                "github_profile_not_found",
                username=username,
                status_code=response.status_code,
            )
            raise GitHubProfileNotFoundError(username)

        try:
            return response.json()
        except ValueError as e:
            logger.error(
                "github_invalid_response",
                username=username,
                content_type=response.headers.get("content-type"),
            )
            raise GitHubUnavailableError(username) from e
