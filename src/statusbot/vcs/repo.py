"""Local repository inspection using GitPython."""

import asyncio
from pathlib import Path

from git import Repo as GitRepo
from git.exc import GitError


class LocalRepositoryError(Exception):
    """Raised when the local checkout cannot be inspected."""


class LocalRepository:
    """Read-only queries against the local git checkout."""

    def __init__(self, path: str | Path = "."):
        self._path = Path(path)
        self._repo: GitRepo | None = None

    @property
    def repo(self) -> GitRepo:
        if self._repo is None:
            try:
                self._repo = GitRepo(self._path, search_parent_directories=True)
            except GitError as e:
                raise LocalRepositoryError(
                    f"Not a git repository: {self._path}"
                ) from e
        return self._repo

    def _head_sha(self) -> str:
        try:
            return self.repo.head.commit.hexsha
        except (GitError, ValueError) as e:
            raise LocalRepositoryError(f"Failed to read HEAD commit: {e}") from e

    def _branch_name(self) -> str:
        try:
            return self.repo.active_branch.name
        except TypeError as e:
            # Detached HEAD, e.g. a CI checkout of a single commit
            raise LocalRepositoryError("HEAD is detached; no branch name available") from e
        except GitError as e:
            raise LocalRepositoryError(f"Failed to read branch name: {e}") from e

    async def get_full_commit_hash(self) -> str:
        """Full 40-character sha of HEAD."""
        return await asyncio.to_thread(self._head_sha)

    async def get_branch_name(self) -> str:
        return await asyncio.to_thread(self._branch_name)
