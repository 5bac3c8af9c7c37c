"""Pytest fixtures for statusbot tests."""

import os

import pytest
from unittest.mock import AsyncMock, MagicMock

from statusbot.config import AuthContext, CiEnvironment, Settings


CI_SHA = "a" * 40
LOCAL_SHA = "f" * 40


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the host's Travis and statusbot variables out of settings objects."""
    for name in list(os.environ):
        if name.upper().startswith(("TRAVIS", "STATUSBOT_")):
            monkeypatch.delenv(name)


@pytest.fixture
def settings():
    """Settings with short delivery windows."""
    return Settings(_env_file=None, throttle_ms=5000, debounce_ms=20)


@pytest.fixture
def ci_env():
    """Travis push build environment."""
    return CiEnvironment(
        travis="true",
        travis_pull_request_sha="",
        travis_commit=CI_SHA,
        travis_pull_request_branch="",
        travis_branch="feature-x",
        travis_job_id="12345",
    )


@pytest.fixture
def local_env():
    """Developer machine environment (no CI variables)."""
    return CiEnvironment(
        travis="",
        travis_pull_request_sha="",
        travis_commit="",
        travis_pull_request_branch="",
        travis_branch="",
        travis_job_id="",
    )


@pytest.fixture
def auth():
    return AuthContext(token="test-token")


@pytest.fixture
def mock_remote_client():
    """Mock GitHub remote client."""
    client = MagicMock()
    client.create_status = AsyncMock(return_value={"id": 1, "state": "pending"})
    client.list_pull_requests = AsyncMock(return_value=[])
    client.get_pull_request_files = AsyncMock(return_value=[])
    client.get_pull_request = AsyncMock(return_value=None)
    client.create_issue_comment = AsyncMock(return_value={"id": 555})
    return client


@pytest.fixture
def mock_local_repo():
    """Mock local checkout."""
    repo = MagicMock()
    repo.get_full_commit_hash = AsyncMock(return_value=LOCAL_SHA)
    repo.get_branch_name = AsyncMock(return_value="local-branch")
    return repo


@pytest.fixture
def sample_pr_data():
    """Sample PR payload as returned by the REST API."""
    return {
        "number": 42,
        "title": "feat: add button ripple",
        "head": {"ref": "feature-x", "sha": CI_SHA},
        "base": {"ref": "develop"},
    }
