"""Resolve which commit and branch a status update applies to."""

import logging
from collections.abc import Awaitable, Callable, Sequence

from statusbot.config import CiEnvironment
from statusbot.errors import IdentityResolutionError
from statusbot.github.models import Identity
from statusbot.vcs import LocalRepository, LocalRepositoryError


logger = logging.getLogger(__name__)

Provider = Callable[[], Awaitable[str | None]]


def static_provider(value: str | None) -> Provider:
    """Provider for a value already known, e.g. a CI variable."""

    async def provide() -> str | None:
        return value or None

    return provide


def local_provider(field: str, lookup: Callable[[], Awaitable[str]]) -> Provider:
    """Provider backed by a local repository query.

    Inspection failures become IdentityResolutionError for ``field``.
    """

    async def provide() -> str | None:
        try:
            return await lookup()
        except LocalRepositoryError as e:
            raise IdentityResolutionError(field, str(e)) from e

    return provide


class IdentityResolver:
    """Walks ordered provider chains for the commit sha and branch name.

    Providers are awaited strictly in order and the first non-empty value
    wins, so later (more expensive) providers are never called once an
    earlier one answers. The two chains are independent.
    """

    def __init__(self, sha_providers: Sequence[Provider], branch_providers: Sequence[Provider]):
        self._sha_providers = list(sha_providers)
        self._branch_providers = list(branch_providers)

    @classmethod
    def from_environment(
        cls, env: CiEnvironment, local_repo: LocalRepository
    ) -> "IdentityResolver":
        """Travis PR values first, then push values, then the local checkout."""
        return cls(
            sha_providers=[
                static_provider(env.travis_pull_request_sha),
                static_provider(env.travis_commit),
                local_provider("sha", local_repo.get_full_commit_hash),
            ],
            branch_providers=[
                static_provider(env.travis_pull_request_branch),
                static_provider(env.travis_branch),
                local_provider("branch", local_repo.get_branch_name),
            ],
        )

    @staticmethod
    async def _first(field: str, providers: Sequence[Provider]) -> str:
        for provider in providers:
            value = await provider()
            if value:
                return value
        raise IdentityResolutionError(field, "no candidate available")

    async def resolve_sha(self) -> str:
        return await self._first("sha", self._sha_providers)

    async def resolve_branch(self, override: str | None = None) -> str:
        if override:
            return override
        return await self._first("branch", self._branch_providers)

    async def resolve(self, branch: str | None = None) -> Identity:
        sha = await self.resolve_sha()
        resolved_branch = await self.resolve_branch(branch)
        logger.debug(f"Resolved build identity sha={sha} branch={resolved_branch}")
        return Identity(sha=sha, branch=resolved_branch)
