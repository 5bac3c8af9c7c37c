"""Command line entry point for reporting from CI scripts."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import click

from statusbot.config import get_settings
from statusbot.errors import StatusBotError
from statusbot.github.models import StatusState
from statusbot.reporter import StatusReporter, create_reporter


logger = logging.getLogger(__name__)


def _run(
    operation: Callable[[StatusReporter], Awaitable[Any]],
    command: str,
    log_failure: bool = True,
) -> Any:
    """Run one reporter operation, then flush and close the reporter.

    Args:
        operation: Coroutine function receiving the reporter
        command: Command name used in the failure log
        log_failure: Log failures here; False when the operation already logs them
    """
    reporter = create_reporter(get_settings())

    async def main() -> Any:
        try:
            return await operation(reporter)
        finally:
            # A one-shot process would otherwise exit before the debounced write fires
            await reporter.aclose(flush=True)

    try:
        return asyncio.run(main())
    except StatusBotError:
        if log_failure:
            logger.exception(f"statusbot {command} failed")
        raise SystemExit(1)


@click.group()
def cli() -> None:
    """Report screenshot test status to GitHub."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@cli.command("status")
@click.argument("state", type=click.Choice([s.value for s in StatusState]))
@click.option("--description", default=None, help="Status description")
@click.option("--target-url", default=None, help="Link shown next to the status")
def status_cmd(state: str, description: str | None, target_url: str | None) -> None:
    """Set the commit status."""

    async def operation(reporter: StatusReporter) -> None:
        reporter.set_status(StatusState(state), description, target_url)

    _run(operation, "status")


@cli.command("error")
def error_cmd() -> None:
    """Mark the commit as errored."""
    # report_error logs its own failure with the traceback
    _run(lambda reporter: reporter.report_error(), "error", log_failure=False)


@cli.command("comment")
@click.argument("pr_number", type=int)
@click.argument("text")
def comment_cmd(pr_number: int, text: str) -> None:
    """Comment on a pull request."""
    comment_id = _run(lambda reporter: reporter.post_comment(pr_number, text), "comment")
    if comment_id is not None:
        click.echo(comment_id)


@cli.command("pr-number")
@click.option("--branch", default=None, help="Head branch (defaults to the build branch)")
def pr_number_cmd(branch: str | None) -> None:
    """Find the open pull request for a branch."""
    number = _run(lambda reporter: reporter.find_pull_request_number(branch), "pr-number")
    if number is not None:
        click.echo(number)


@cli.command("pr-files")
@click.argument("pr_number", type=int)
def pr_files_cmd(pr_number: int) -> None:
    """List files changed by a pull request."""
    files = _run(lambda reporter: reporter.list_pull_request_files(pr_number), "pr-files")
    for f in files:
        click.echo(f"{f.status}\t{f.filename}")


@cli.command("base-branch")
@click.argument("pr_number", type=int)
def base_branch_cmd(pr_number: int) -> None:
    """Print the base branch of a pull request."""
    click.echo(
        _run(lambda reporter: reporter.get_pull_request_base_branch(pr_number), "base-branch")
    )


if __name__ == "__main__":
    cli()
