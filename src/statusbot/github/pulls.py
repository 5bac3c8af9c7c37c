"""Read-only pull request lookups."""

import json
import logging

from github import GithubException

from statusbot.errors import EmptyResponseError, RemoteReadError, call_site
from statusbot.github.client import GitHubRemoteClient
from statusbot.github.models import PullRequestFile
from statusbot.status.identity import IdentityResolver


logger = logging.getLogger(__name__)


class PullRequestDirectory:
    """Queries GitHub for pull request metadata.

    Only the first page of each listing is read. With more open pull requests
    than ``pr_page_size``, older ones are invisible to
    ``find_pull_request_number``.
    """

    def __init__(
        self,
        client: GitHubRemoteClient,
        resolver: IdentityResolver,
        pr_page_size: int = 100,
        files_page_size: int = 300,
    ):
        self.client = client
        self.resolver = resolver
        self.pr_page_size = pr_page_size
        self.files_page_size = files_page_size

    async def find_pull_request_number(self, branch: str | None = None) -> int | None:
        """Find the open pull request whose head is ``branch``.

        Args:
            branch: Head branch name. Defaults to the current build's branch.

        Returns:
            PR number, or None if no open PR on the first page matches
        """
        branch = await self.resolver.resolve_branch(branch)

        called_from = call_site("list_pull_requests")
        try:
            pulls = await self.client.list_pull_requests(page_size=self.pr_page_size)
        except (GithubException, OSError) as e:
            raise RemoteReadError(
                f'Failed to get pull request number for branch "{branch}": {e}',
                operation="list_pull_requests",
                called_from=called_from,
            ) from e

        for pr in pulls:
            if pr.get("head", {}).get("ref") == branch:
                return pr["number"]

        logger.info(f'No open pull request found for branch "{branch}"')
        return None

    async def list_pull_request_files(self, pr_number: int) -> list[PullRequestFile]:
        called_from = call_site("get_pull_request_files")
        try:
            files = await self.client.get_pull_request_files(
                pr_number, page_size=self.files_page_size
            )
        except (GithubException, OSError) as e:
            raise RemoteReadError(
                f"Failed to get file list for PR #{pr_number}: {e}",
                operation="get_pull_request_files",
                called_from=called_from,
            ) from e

        return [PullRequestFile.from_dict(f) for f in files]

    async def get_pull_request_base_branch(self, pr_number: int) -> str:
        """Get the remote-qualified base branch of a pull request.

        Args:
            pr_number: PR number

        Returns:
            Base branch as ``origin/<ref>``

        Raises:
            RemoteReadError: If the API call fails
            EmptyResponseError: If GitHub returns no data for the PR
        """
        called_from = call_site("get_pull_request")
        try:
            data = await self.client.get_pull_request(pr_number)
        except (GithubException, OSError) as e:
            raise RemoteReadError(
                f"Failed to get the base branch for PR #{pr_number}: {e}",
                operation="get_pull_request",
                called_from=called_from,
            ) from e

        base_ref = (data or {}).get("base", {}).get("ref")
        if not base_ref:
            raise EmptyResponseError(pr_number, json.dumps(data, indent=2, default=str))

        return f"origin/{base_ref}"
