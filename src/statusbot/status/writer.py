"""Performs the commit status write against GitHub."""

import logging
from typing import Any

from github import GithubException

from statusbot.errors import NonFatalError, RemoteWriteError, call_site
from statusbot.github.client import GitHubRemoteClient
from statusbot.github.models import ResolvedStatusRequest
from statusbot.status.audit import AuditStore, NullAuditStore


logger = logging.getLogger(__name__)


class RemoteStatusWriter:
    """Writes resolved status requests under a fixed status context."""

    def __init__(
        self,
        client: GitHubRemoteClient,
        context: str,
        audit_store: AuditStore | None = None,
    ):
        """Initialize the writer.

        Args:
            client: GitHub client used for the status call
            context: Status context label identifying this reporter
            audit_store: Best-effort record of every write
        """
        self.client = client
        self.context = context
        self.audit_store = audit_store or NullAuditStore()

    async def _persist(self, request: ResolvedStatusRequest) -> None:
        try:
            await self.audit_store.persist(request)
        except Exception as e:
            error = NonFatalError(f"Failed to record status for {request.sha}: {e}")
            logger.warning(str(error), exc_info=e)

    async def write(self, request: ResolvedStatusRequest) -> dict[str, Any]:
        """Create or overwrite the commit status for ``request.sha``.

        Args:
            request: Fully resolved status request

        Returns:
            Raw status payload returned by GitHub

        Raises:
            RemoteWriteError: If the API call fails
        """
        await self._persist(request)

        called_from = call_site("create_status")
        try:
            result = await self.client.create_status(
                sha=request.sha,
                state=request.state.value,
                target_url=request.target_url,
                description=request.description,
                context=self.context,
            )
        except (GithubException, OSError) as e:
            raise RemoteWriteError(
                f"Failed to set commit status on {request.sha}: {e}",
                operation="create_status",
                called_from=called_from,
            ) from e

        logger.info(f"Set {self.context} status to {request.state.value} on {request.sha[:10]}")
        return result
