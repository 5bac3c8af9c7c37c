"""Statusbot - commit status, pull request and comment reporting for CI."""

from statusbot.reporter import StatusReporter, create_reporter

__version__ = "0.1.0"

__all__ = ["StatusReporter", "create_reporter"]
