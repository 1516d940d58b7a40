"""History sinks for executed requests."""

import logging
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

from apirunner.config import get_settings
from apirunner.schemas.api_request import RequestOptions, ResponseData

logger = logging.getLogger(__name__)


@dataclass
class HistoryEntry:
    """One executed request and its response."""
    request: RequestOptions
    response: ResponseData
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InMemoryHistory:
    """Keeps the most recent ``limit`` entries, oldest first."""

    def __init__(self, limit: int | None = None):
        self._entries: deque[HistoryEntry] = deque(maxlen=limit or get_settings().history_limit)

    def record(self, request: RequestOptions, response: ResponseData) -> None:
        self._entries.append(HistoryEntry(request=request, response=response))

    def entries(self, limit: int | None = None) -> list[HistoryEntry]:
        entries = list(self._entries)
        if limit is not None:
            return entries[-limit:]
        return entries

    def clear(self) -> None:
        self._entries.clear()


class LoggingHistory:
    """Writes one log line per executed request."""

    def record(self, request: RequestOptions, response: ResponseData) -> None:
        logger.info(
            "%s %s -> %s %s (%sms)",
            request.method,
            request.url,
            response.status,
            response.status_text,
            response.duration,
        )


class NullHistory:
    """Discards everything."""

    def record(self, request: RequestOptions, response: ResponseData) -> None:
        return None
