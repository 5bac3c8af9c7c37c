"""Configuration, credentials and CI environment detection."""

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Status reporter configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="STATUSBOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # GitHub target
    github_owner: str = "material-components"
    github_repo: str = "material-components-web"
    status_context: str = "screenshot-test/butter-bot"

    # CI settings
    ci_host: str = "travis-ci.com"
    credentials_path: str = "auth/github.json"
    repo_path: str = "."

    # Delivery settings
    throttle_ms: int = 5000
    debounce_ms: int = 2500
    pr_page_size: int = 100
    pr_files_page_size: int = 300

    # Audit trail (disabled when empty)
    audit_log_path: str = ""

    # Logging
    log_level: str = "INFO"

    def job_url(self, job_id: str | None) -> str:
        """Build the CI job URL used as the target of error statuses."""
        return f"https://{self.ci_host}/{self.github_owner}/{self.github_repo}/jobs/{job_id}"


class CiEnvironment(BaseSettings):
    """Read-only view of the Travis CI environment variables."""

    model_config = SettingsConfigDict(extra="ignore")

    travis: str = ""
    travis_pull_request_sha: str = ""
    travis_commit: str = ""
    travis_pull_request_branch: str = ""
    travis_branch: str = ""
    travis_job_id: str = ""

    @property
    def is_ci(self) -> bool:
        return self.travis == "true"


@dataclass(frozen=True)
class AuthContext:
    """Credentials loaded once at startup."""

    token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


def load_token(path: str | Path) -> str | None:
    """Read the personal access token from a credential file.

    Args:
        path: Path to a JSON file shaped like
            ``{"api_key": {"personal_access_token": "..."}}``

    Returns:
        The token, or None when the file is absent or unusable
    """
    token_path = Path(path)
    if not token_path.exists():
        logger.debug(f"No credential file at {token_path}")
        return None

    try:
        data = json.loads(token_path.read_text())
        token = data["api_key"]["personal_access_token"]
    except (OSError, json.JSONDecodeError, KeyError, TypeError) as e:
        logger.debug(f"Ignoring unreadable credential file {token_path}: {e}")
        return None

    return token or None


def load_auth(settings: Settings) -> AuthContext:
    return AuthContext(token=load_token(settings.credentials_path))


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
