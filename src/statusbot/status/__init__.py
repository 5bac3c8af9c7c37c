"""Commit status delivery."""

from statusbot.status.audit import AuditStore, JsonLinesAuditStore, NullAuditStore
from statusbot.status.gate import ActivationGate
from statusbot.status.identity import IdentityResolver
from statusbot.status.scheduler import Debounce, SchedulerState, Throttle, UpdateScheduler
from statusbot.status.writer import RemoteStatusWriter

__all__ = [
    "ActivationGate",
    "AuditStore",
    "Debounce",
    "IdentityResolver",
    "JsonLinesAuditStore",
    "NullAuditStore",
    "RemoteStatusWriter",
    "SchedulerState",
    "Throttle",
    "UpdateScheduler",
]
