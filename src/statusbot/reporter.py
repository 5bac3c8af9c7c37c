"""StatusReporter: the single entry point CI scripts talk to."""

import logging
from typing import Any

from statusbot.config import (
    AuthContext,
    CiEnvironment,
    Settings,
    get_settings,
    load_auth,
)
from statusbot.github.client import GitHubRemoteClient
from statusbot.github.comments import CommentPoster
from statusbot.github.models import PullRequestFile, StatusRequest, StatusState
from statusbot.github.pulls import PullRequestDirectory
from statusbot.status.audit import AuditStore, JsonLinesAuditStore, NullAuditStore
from statusbot.status.gate import ActivationGate
from statusbot.status.identity import IdentityResolver
from statusbot.status.scheduler import UpdateScheduler
from statusbot.status.writer import RemoteStatusWriter
from statusbot.vcs import LocalRepository


logger = logging.getLogger(__name__)

ERROR_DESCRIPTION = "Error running screenshot tests"


class StatusReporter:
    """Reports screenshot test progress to GitHub.

    Owns the one ``UpdateScheduler`` of the process. In-progress updates go
    through the scheduler; terminal errors are written immediately.
    """

    def __init__(
        self,
        settings: Settings,
        env: CiEnvironment,
        auth: AuthContext,
        client: GitHubRemoteClient,
        local_repo: LocalRepository,
        audit_store: AuditStore | None = None,
        resolver: IdentityResolver | None = None,
    ):
        self.settings = settings
        self.env = env
        self.client = client
        self.gate = ActivationGate(is_ci=env.is_ci, auth=auth)
        self.resolver = resolver or IdentityResolver.from_environment(env, local_repo)
        self.writer = RemoteStatusWriter(
            client, context=settings.status_context, audit_store=audit_store
        )
        self.scheduler = UpdateScheduler(
            self._create_status_unthrottled,
            throttle_ms=settings.throttle_ms,
            debounce_ms=settings.debounce_ms,
        )
        self.pulls = PullRequestDirectory(
            client,
            self.resolver,
            pr_page_size=settings.pr_page_size,
            files_page_size=settings.pr_files_page_size,
        )
        self.comments = CommentPoster(client, self.gate)

    # ------------------------------------------------------------------
    # Commit statuses
    # ------------------------------------------------------------------

    def set_status(
        self,
        state: StatusState,
        description: str | None = None,
        target_url: str | None = None,
    ) -> None:
        """Queue an in-progress status update. Returns immediately."""
        if not self.gate.is_open:
            logger.debug(f"Skipping {state.value} status: not in CI or not authenticated")
            return

        self.scheduler.submit(
            StatusRequest(state=state, description=description, target_url=target_url)
        )

    async def report_error(self) -> dict[str, Any] | None:
        """Mark the commit as errored, linking to the CI job.

        Written immediately, bypassing the scheduler. A failure here is the
        pipeline's last chance to signal trouble, so it is logged at ERROR
        and re-raised.
        """
        if not self.gate.is_open:
            logger.debug("Skipping error status: not in CI or not authenticated")
            return None

        request = StatusRequest(
            state=StatusState.ERROR,
            description=ERROR_DESCRIPTION,
            target_url=self.settings.job_url(self.env.travis_job_id),
        )
        try:
            return await self._create_status_unthrottled(request)
        except Exception:
            logger.error("Failed to report error status to GitHub", exc_info=True)
            raise

    async def _create_status_unthrottled(self, request: StatusRequest) -> dict[str, Any] | None:
        if not self.gate.is_authenticated:
            return None

        identity = await self.resolver.resolve()
        return await self.writer.write(request.resolve(identity.sha, identity.branch))

    # ------------------------------------------------------------------
    # Pull requests
    # ------------------------------------------------------------------

    async def find_pull_request_number(self, branch: str | None = None) -> int | None:
        return await self.pulls.find_pull_request_number(branch)

    async def list_pull_request_files(self, pr_number: int) -> list[PullRequestFile]:
        return await self.pulls.list_pull_request_files(pr_number)

    async def get_pull_request_base_branch(self, pr_number: int) -> str:
        return await self.pulls.get_pull_request_base_branch(pr_number)

    async def post_comment(self, pr_number: int, text: str) -> int | None:
        return await self.comments.post_comment(pr_number, text)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self, flush: bool = False) -> None:
        """Stop the scheduler.

        Args:
            flush: Deliver a pending debounced update before stopping. Without
                it the pending update is dropped. Writes already fired are
                awaited either way.
        """
        if flush:
            await self.scheduler.flush()
        self.scheduler.dispose()
        await self.scheduler.drain()
        self.client.close()


def create_reporter(settings: Settings | None = None) -> StatusReporter:
    """Wire a reporter to the real GitHub API, local checkout and environment."""
    settings = settings or get_settings()
    auth = load_auth(settings)
    audit_store = (
        JsonLinesAuditStore(settings.audit_log_path)
        if settings.audit_log_path
        else NullAuditStore()
    )
    return StatusReporter(
        settings=settings,
        env=CiEnvironment(),
        auth=auth,
        client=GitHubRemoteClient(auth.token, settings.github_owner, settings.github_repo),
        local_repo=LocalRepository(settings.repo_path),
        audit_store=audit_store,
    )
