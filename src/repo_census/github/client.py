"""GitHub REST API client."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

BASE_URL = "https://api.github.com"
PER_PAGE = 100


class GitHubClient:
    """Async GitHub REST API client with page-numbered pagination."""

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        verify_ssl: bool = True,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self._client = httpx.AsyncClient(
            base_url=base_url or BASE_URL,
            headers=headers,
            timeout=30.0,
            verify=verify_ssl,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def _get(
        self, url: str, params: dict[str, Any] | None = None
    ) -> httpx.Response:
        logger.debug("GET %s %s", url, params or "")
        response = await self._client.get(url, params=params)
        response.raise_for_status()
        return response

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._get(url, params)
        return response.json()

    async def _paginate(
        self, url: str, params: dict[str, Any] | None = None
    ) -> list[Any]:
        """Request pages 1, 2, ... while the Link header advertises a next page."""
        results: list[Any] = []
        page = 1

        while True:
            page_params = dict(params or {})
            page_params["page"] = page
            page_params["per_page"] = PER_PAGE
            response = await self._get(url, page_params)
            data = response.json()
            if not isinstance(data, list):
                raise ValueError(
                    f"Expected a JSON list from {url}, got {type(data).__name__}"
                )
            results.extend(data)

            link_header = response.headers.get("Link", "")
            if 'rel="next"' not in link_header:
                break
            page += 1

        return results

    async def list_org_repos(self, org: str) -> list[dict[str, Any]]:
        """List all repositories for an organization."""
        return await self._paginate(f"/orgs/{org}/repos")

    async def get_repo(self, owner: str, repo: str) -> dict[str, Any]:
        """Get repository metadata (size, language, ...)."""
        return await self._get_json(f"/repos/{owner}/{repo}")

    async def list_commits(
        self, owner: str, repo: str, per_page: int = 1
    ) -> list[dict[str, Any]]:
        """List the most recent commits of a repository, newest first."""
        try:
            data = await self._get_json(
                f"/repos/{owner}/{repo}/commits", params={"per_page": per_page}
            )
        except httpx.HTTPStatusError as exc:
            # GitHub answers 409 for a repository without any commits
            if exc.response.status_code == 409:
                return []
            raise
        return data if isinstance(data, list) else []
