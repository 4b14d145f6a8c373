"""
Time source for the service.

Creation and update timestamps, the "expiry in the past" check and the
overdue views all ask a ``Clock`` for the current instant instead of
calling ``datetime.now`` directly, so tests can move time forward.
All instants are timezone-aware UTC datetimes.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
