"""Unit tests for GitHubService."""

from unittest.mock import AsyncMock

import httpx
import pytest

from core.exceptions import GitHubProfileNotFoundError, GitHubUnavailableError
from domain.services.github_service import GitHubService


@pytest.fixture
def client() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(client: AsyncMock) -> GitHubService:
    return GitHubService(client)


class TestGetRepos:
    @pytest.mark.asyncio
    async def test_returns_body_unchanged(self, service: GitHubService, client: AsyncMock):
        repos = [{"name": "hello-world", "stargazers_count": 7}]
        client.list_repos.return_value = httpx.Response(200, json=repos)

        result = await service.get_repos("octocat")

        assert result == repos
        client.list_repos.assert_called_once_with("octocat")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [404, 403, 500])
    async def test_non_success_is_not_found(
        self, service: GitHubService, client: AsyncMock, status_code: int
    ):
        client.list_repos.return_value = httpx.Response(status_code, json={"message": "x"})

        with pytest.raises(GitHubProfileNotFoundError) as exc_info:
            await service.get_repos("ghost")

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "No GitHub profile found"

    @pytest.mark.asyncio
    async def test_transport_error_is_unavailable(
        self, service: GitHubService, client: AsyncMock
    ):
        client.list_repos.side_effect = httpx.ConnectTimeout("timed out")

        with pytest.raises(GitHubUnavailableError) as exc_info:
            await service.get_repos("octocat")

        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_success_with_non_json_body_is_unavailable(
        self, service: GitHubService, client: AsyncMock
    ):
        client.list_repos.return_value = httpx.Response(
            200, content=b"<html>maintenance</html>", headers={"content-type": "text/html"}
        )

        with pytest.raises(GitHubUnavailableError) as exc_info:
            await service.get_repos("octocat")

        assert exc_info.value.status_code == 502
