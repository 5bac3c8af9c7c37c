"""Posting comments on pull requests."""

import logging

from github import GithubException

from statusbot.errors import RemoteWriteError, call_site
from statusbot.github.client import GitHubRemoteClient
from statusbot.status.gate import ActivationGate


logger = logging.getLogger(__name__)


class CommentPoster:
    """Posts a new comment for every call; nothing is deduplicated."""

    def __init__(self, client: GitHubRemoteClient, gate: ActivationGate):
        self.client = client
        self.gate = gate

    async def post_comment(self, pr_number: int, text: str) -> int | None:
        """Post ``text`` on a pull request.

        Args:
            pr_number: PR number
            text: Comment body (markdown)

        Returns:
            ID of the new comment, or None if the gate is closed
        """
        if not self.gate.is_open:
            logger.debug(f"Skipping comment on PR #{pr_number}: not in CI or not authenticated")
            return None

        called_from = call_site("create_issue_comment")
        try:
            comment = await self.client.create_issue_comment(pr_number, text)
        except (GithubException, OSError) as e:
            raise RemoteWriteError(
                f"Failed to create comment on PR #{pr_number}: {e}",
                operation="create_issue_comment",
                called_from=called_from,
            ) from e

        logger.info(f"Posted comment on PR #{pr_number}")
        return comment.get("id")
