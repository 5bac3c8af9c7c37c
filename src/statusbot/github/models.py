"""Data models for GitHub commit statuses and pull requests."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class StatusState(str, Enum):
    """Commit status state."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"


@dataclass(frozen=True)
class StatusRequest:
    """A desired commit status, not yet bound to a commit."""

    state: StatusState
    description: str | None = None
    target_url: str | None = None

    def resolve(self, sha: str, branch: str) -> "ResolvedStatusRequest":
        return ResolvedStatusRequest(
            state=self.state,
            description=self.description,
            target_url=self.target_url,
            sha=sha,
            branch=branch,
        )


@dataclass(frozen=True)
class ResolvedStatusRequest:
    """A status request bound to the commit and branch it applies to."""

    state: StatusState
    sha: str
    branch: str
    description: str | None = None
    target_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["state"] = self.state.value
        return data


@dataclass(frozen=True)
class Identity:
    """Commit sha and branch name for the current build."""

    sha: str
    branch: str


@dataclass
class PullRequestFile:
    """A file changed by a pull request."""

    filename: str
    status: str = "modified"  # "added", "modified", "removed", "renamed"
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: str = ""
    sha: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PullRequestFile":
        return cls(
            filename=data["filename"],
            status=data.get("status", "modified"),
            additions=data.get("additions", 0),
            deletions=data.get("deletions", 0),
            changes=data.get("changes", 0),
            patch=data.get("patch") or "",
            sha=data.get("sha"),
        )
