"""Error types raised by the status reporter."""

import traceback


class StatusBotError(Exception):
    """Base class for status reporter failures."""


class IdentityResolutionError(StatusBotError):
    """Raised when no commit sha or branch name can be determined."""

    def __init__(self, field: str, detail: str = ""):
        self.field = field
        message = f"Unable to resolve {field} for the current build"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RemoteCallError(StatusBotError):
    """A GitHub API call failed.

    Carries the name of the failed operation and the call site that issued
    it. The underlying exception is available as ``__cause__``.
    """

    def __init__(self, message: str, operation: str, called_from: str = ""):
        self.operation = operation
        self.called_from = called_from
        text = message
        if called_from:
            text = f"{message}\n{called_from}"
        super().__init__(text)


class RemoteWriteError(RemoteCallError):
    """Raised when creating a status or comment fails."""


class RemoteReadError(RemoteCallError):
    """Raised when a pull request lookup fails."""


class EmptyResponseError(StatusBotError):
    """The API call succeeded but returned no usable data."""

    def __init__(self, pr_number: int, response: str = ""):
        self.pr_number = pr_number
        self.response = response
        super().__init__(f"Unable to fetch data for GitHub PR #{pr_number}:\n{response}")


class NonFatalError(StatusBotError):
    """Failure of a best-effort side task. Logged, never raised to callers."""


def call_site(operation: str, skip: int = 2) -> str:
    """Describe where ``operation`` was invoked from.

    Args:
        operation: Name of the operation being performed
        skip: Number of innermost frames to drop (this helper and its caller)

    Returns:
        A short multi-line stack description
    """
    frames = traceback.extract_stack()[:-skip][-3:]
    lines = [f"    at {f.name} ({f.filename}:{f.lineno})" for f in reversed(frames)]
    return f"{operation} called from:\n" + "\n".join(lines)
