"""Local version control inspection."""

from statusbot.vcs.repo import LocalRepository, LocalRepositoryError

__all__ = ["LocalRepository", "LocalRepositoryError"]
