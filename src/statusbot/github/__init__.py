"""GitHub integration module for statusbot."""

from statusbot.github.client import GitHubRemoteClient
from statusbot.github.models import (
    Identity,
    PullRequestFile,
    ResolvedStatusRequest,
    StatusRequest,
    StatusState,
)

__all__ = [
    "GitHubRemoteClient",
    "Identity",
    "PullRequestFile",
    "ResolvedStatusRequest",
    "StatusRequest",
    "StatusState",
]
