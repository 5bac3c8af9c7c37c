"""Audit trail for status requests sent to GitHub."""

import asyncio
import json
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path

from statusbot.github.models import ResolvedStatusRequest


class AuditStore(ABC):
    """Best-effort record of every status write."""

    @abstractmethod
    async def persist(self, request: ResolvedStatusRequest) -> None:
        """Record a resolved request. May raise; callers treat failure as non-fatal."""


class NullAuditStore(AuditStore):
    async def persist(self, request: ResolvedStatusRequest) -> None:
        return None


class JsonLinesAuditStore(AuditStore):
    """Appends one JSON object per status write to a local file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _append(self, request: ResolvedStatusRequest) -> None:
        record = request.to_dict()
        record["recorded_at"] = datetime.now(timezone.utc).isoformat()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")

    async def persist(self, request: ResolvedStatusRequest) -> None:
        await asyncio.to_thread(self._append, request)
