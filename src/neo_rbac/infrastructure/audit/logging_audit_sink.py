"""
Audit sink that writes authorization events to the application log.

Keeps a bounded in-memory history so operators and tests can inspect the
most recent decisions.
"""
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, List, Optional

from loguru import logger


@dataclass(frozen=True)
class AuthorizationEvent:
    """One recorded authorization decision."""
    permission_id: str
    user_id: str
    granted: bool
    recorded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __str__(self) -> str:
        outcome = "GRANTED" if self.granted else "DENIED"
        return f"{outcome} {self.permission_id} user={self.user_id}"


class LoggingAuditSink:
    """AuditSinkProtocol implementation backed by loguru."""

    def __init__(self, history_size: int = 1000):
        if history_size <= 0:
            raise ValueError("History size must be positive")
        self._history: Deque[AuthorizationEvent] = deque(maxlen=history_size)
        self._lock = threading.Lock()

    def record_authorization_event(self, permission_id: str, user_id: str, granted: bool) -> None:
        event = AuthorizationEvent(permission_id=permission_id, user_id=user_id, granted=granted)
        with self._lock:
            self._history.append(event)
        logger.bind(audit=True).info(f"AuthZ {event}")

    def recent_events(self, user_id: Optional[str] = None) -> List[AuthorizationEvent]:
        """Recorded events, oldest first, optionally filtered by user."""
        with self._lock:
            events = list(self._history)
        if user_id is None:
            return events
        return [event for event in events if event.user_id == user_id]

    def clear(self) -> None:
        with self._lock:
            self._history.clear()
