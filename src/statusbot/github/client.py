"""Async GitHub REST client wrapping PyGithub."""

import asyncio
from typing import Any

from github import Auth, Github


class GitHubRemoteClient:
    """Thin async facade over the PyGithub requester.

    Calls return the raw JSON payloads so callers can tell an empty response
    apart from a transport failure. Errors are raised as
    ``github.GithubException`` and left for callers to wrap.
    """

    def __init__(
        self,
        token: str | None,
        owner: str,
        repo: str,
        base_url: str | None = None,
    ):
        auth = Auth.Token(token) if token else None
        if base_url:
            self._github = Github(auth=auth, base_url=base_url)
        else:
            self._github = Github(auth=auth)
        self.owner = owner
        self.repo = repo

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _request(
        self,
        verb: str,
        path: str,
        parameters: dict[str, Any] | None = None,
        input: dict[str, Any] | None = None,
    ) -> Any:
        _, data = self._github.requester.requestJsonAndCheck(
            verb,
            f"{self.repo_path}{path}",
            parameters=parameters,
            input=input,
        )
        return data

    async def _call(self, verb: str, path: str, **kwargs: Any) -> Any:
        return await asyncio.to_thread(self._request, verb, path, **kwargs)

    # ------------------------------------------------------------------
    # Statuses
    # ------------------------------------------------------------------

    async def create_status(
        self,
        sha: str,
        state: str,
        target_url: str | None,
        description: str | None,
        context: str,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {"state": state, "context": context}
        if target_url is not None:
            payload["target_url"] = target_url
        if description is not None:
            payload["description"] = description
        return await self._call("POST", f"/statuses/{sha}", input=payload)

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------

    async def list_pull_requests(self, page_size: int) -> list[dict[str, Any]]:
        """List open pull requests (first page only)."""
        data = await self._call(
            "GET", "/pulls", parameters={"state": "open", "per_page": page_size}
        )
        return data or []

    async def get_pull_request_files(
        self, number: int, page_size: int
    ) -> list[dict[str, Any]]:
        """List files changed by a pull request (first page only)."""
        data = await self._call(
            "GET", f"/pulls/{number}/files", parameters={"per_page": page_size}
        )
        return data or []

    async def get_pull_request(self, number: int) -> dict[str, Any] | None:
        data = await self._call("GET", f"/pulls/{number}")
        return data or None

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    async def create_issue_comment(self, number: int, body: str) -> dict[str, Any]:
        return await self._call(
            "POST", f"/issues/{number}/comments", input={"body": body}
        )

    def close(self) -> None:
        self._github.close()
