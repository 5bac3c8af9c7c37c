"""Unit tests for the StatusReporter entry points."""

import asyncio
import logging

import pytest
from github import GithubException

from statusbot.config import AuthContext, Settings
from statusbot.errors import RemoteWriteError
from statusbot.github.models import StatusState
from statusbot.reporter import ERROR_DESCRIPTION, StatusReporter, create_reporter
from statusbot.status.audit import JsonLinesAuditStore, NullAuditStore


CI_SHA = "a" * 40


@pytest.fixture
def make_reporter(settings, ci_env, auth, mock_remote_client, mock_local_repo):
    def make(env=ci_env, auth=auth):
        return StatusReporter(
            settings=settings,
            env=env,
            auth=auth,
            client=mock_remote_client,
            local_repo=mock_local_repo,
        )

    return make


class TestGateClosure:
    """Tests that a closed gate makes every entry point a no-op."""

    @pytest.mark.asyncio
    async def test_not_ci(self, make_reporter, local_env, mock_remote_client):
        """Test that nothing is sent outside CI."""
        reporter = make_reporter(env=local_env)

        reporter.set_status(StatusState.PENDING, "Running")
        assert await reporter.report_error() is None
        assert await reporter.post_comment(42, "hello") is None
        await asyncio.sleep(0.05)
        await reporter.scheduler.flush()

        mock_remote_client.create_status.assert_not_awaited()
        mock_remote_client.create_issue_comment.assert_not_awaited()
        assert reporter.scheduler.state.last_dispatched_at is None

    @pytest.mark.asyncio
    async def test_not_authenticated(self, make_reporter, mock_remote_client):
        """Test that nothing is sent without a token."""
        reporter = make_reporter(auth=AuthContext(token=None))

        reporter.set_status(StatusState.PENDING, "Running")
        assert await reporter.report_error() is None
        assert await reporter.post_comment(42, "hello") is None
        await reporter.scheduler.flush()

        mock_remote_client.create_status.assert_not_awaited()
        mock_remote_client.create_issue_comment.assert_not_awaited()


class TestSetStatus:
    """Tests for scheduled status updates."""

    @pytest.mark.asyncio
    async def test_identical_requests_resolve_identically(self, make_reporter, mock_remote_client):
        """Test that identical payloads produce identical writes for the same commit."""
        reporter = make_reporter()

        reporter.set_status(StatusState.PENDING, "3 of 9", "https://example.com/r.html")
        reporter.set_status(StatusState.PENDING, "3 of 9", "https://example.com/r.html")
        await asyncio.sleep(0.1)
        await reporter.scheduler.flush()

        calls = mock_remote_client.create_status.await_args_list
        assert len(calls) == 2
        assert calls[0] == calls[1]
        assert calls[0].kwargs["sha"] == CI_SHA
        assert calls[0].kwargs["context"] == "screenshot-test/butter-bot"

    @pytest.mark.asyncio
    async def test_returns_before_write(self, make_reporter, mock_remote_client):
        """Test that set_status does not wait for the network."""
        reporter = make_reporter()

        result = reporter.set_status(StatusState.PENDING, "Starting")

        assert result is None
        mock_remote_client.create_status.assert_not_awaited()
        await reporter.aclose(flush=True)
        assert mock_remote_client.create_status.await_count == 2

    @pytest.mark.asyncio
    async def test_scheduled_failure_is_logged(self, make_reporter, mock_remote_client, caplog):
        """Test that scheduled write failures do not reach the caller."""
        mock_remote_client.create_status.side_effect = GithubException(500, {"message": "boom"}, None)
        reporter = make_reporter()

        with caplog.at_level(logging.ERROR):
            reporter.set_status(StatusState.FAILURE, "3 diffs")
            await reporter.aclose(flush=True)

        assert "Scheduled status write" in caplog.text

    @pytest.mark.asyncio
    async def test_aclose_without_flush_drops_pending(self, make_reporter, mock_remote_client):
        """Test that closing without flush loses the debounced update."""
        reporter = make_reporter()

        reporter.set_status(StatusState.PENDING, "1 of 2")
        reporter.set_status(StatusState.SUCCESS, "2 of 2")
        await reporter.aclose()

        mock_remote_client.create_status.assert_awaited_once()
        assert mock_remote_client.create_status.await_args.kwargs["description"] == "1 of 2"

    @pytest.mark.asyncio
    async def test_aclose_waits_for_fired_writes(self, make_reporter, mock_remote_client):
        """Test that the client is closed only after in-flight writes complete."""
        order = []

        async def slow_status(**kwargs):
            await asyncio.sleep(0.05)
            order.append("write")
            return {"id": 1}

        mock_remote_client.create_status.side_effect = slow_status
        mock_remote_client.close.side_effect = lambda: order.append("close")
        reporter = make_reporter()

        reporter.set_status(StatusState.PENDING, "1 of 2")
        await asyncio.sleep(0)
        await reporter.aclose()

        assert order == ["write", "close"]
        assert reporter.scheduler.in_flight == 0


class TestReportError:
    """Tests for the terminal error status."""

    @pytest.mark.asyncio
    async def test_writes_immediately_with_job_url(self, make_reporter, mock_remote_client):
        """Test that the error status links to the CI job and bypasses the scheduler."""
        reporter = make_reporter()

        await reporter.report_error()

        mock_remote_client.create_status.assert_awaited_once_with(
            sha=CI_SHA,
            state="error",
            target_url="https://travis-ci.com/material-components/material-components-web/jobs/12345",
            description=ERROR_DESCRIPTION,
            context="screenshot-test/butter-bot",
        )
        assert reporter.scheduler.state.last_dispatched_at is None

    @pytest.mark.asyncio
    async def test_failure_is_loud(self, make_reporter, mock_remote_client, caplog):
        """Test that a failed error report is logged at ERROR and re-raised."""
        mock_remote_client.create_status.side_effect = GithubException(500, {"message": "boom"}, None)
        reporter = make_reporter()

        with caplog.at_level(logging.ERROR, logger="statusbot.reporter"):
            with pytest.raises(RemoteWriteError):
                await reporter.report_error()

        assert "Failed to report error status" in caplog.text


class TestPullRequestDelegation:
    """Tests that PR lookups reach the directory."""

    @pytest.mark.asyncio
    async def test_base_branch(self, make_reporter, mock_remote_client, sample_pr_data):
        """Test base branch lookup through the reporter."""
        mock_remote_client.get_pull_request.return_value = sample_pr_data
        reporter = make_reporter()

        assert await reporter.get_pull_request_base_branch(42) == "origin/develop"

    @pytest.mark.asyncio
    async def test_find_pull_request_number(self, make_reporter, mock_remote_client, sample_pr_data):
        """Test PR number lookup through the reporter."""
        mock_remote_client.list_pull_requests.return_value = [sample_pr_data]
        reporter = make_reporter()

        assert await reporter.find_pull_request_number() == 42


class TestCreateReporter:
    """Tests for wiring the real collaborators."""

    def test_audit_store_follows_settings(self, tmp_path):
        """Test that an audit path enables the JSON lines store."""
        settings = Settings(
            _env_file=None,
            credentials_path=str(tmp_path / "missing.json"),
            audit_log_path=str(tmp_path / "audit.jsonl"),
        )

        reporter = create_reporter(settings)

        assert isinstance(reporter.writer.audit_store, JsonLinesAuditStore)
        assert not reporter.gate.is_authenticated

    def test_no_audit_path(self, tmp_path):
        """Test that no audit path means no audit store."""
        settings = Settings(_env_file=None, credentials_path=str(tmp_path / "missing.json"))

        reporter = create_reporter(settings)

        assert isinstance(reporter.writer.audit_store, NullAuditStore)
