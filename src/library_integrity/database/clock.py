"""
Clocks used by the stores for defaults and update triggers
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional


class Clock(ABC):
    """Source of timezone-aware UTC timestamps"""

    @abstractmethod
    def now(self) -> datetime:
        """Current time"""

    @abstractmethod
    def advance(self, delta: Optional[timedelta] = None, **kwargs) -> datetime:
        """Move the clock forward by ``delta`` (or ``timedelta(**kwargs)``)"""


class SystemClock(Clock):
    """Wall-clock time, optionally shifted by an offset"""

    def __init__(self):
        self._offset = timedelta(0)

    def now(self) -> datetime:
        return datetime.now(timezone.utc) + self._offset

    def advance(self, delta: Optional[timedelta] = None, **kwargs) -> datetime:
        self._offset += delta if delta is not None else timedelta(**kwargs)
        return self.now()


class ManualClock(Clock):
    """Deterministic clock that only moves when told to"""

    def __init__(self, start: Optional[datetime] = None):
        start = start or datetime.now(timezone.utc).replace(microsecond=0)
        if start.tzinfo is None:
            start = start.replace(tzinfo=timezone.utc)
        self._now = start

    def now(self) -> datetime:
        return self._now

    def advance(self, delta: Optional[timedelta] = None, **kwargs) -> datetime:
        step = delta if delta is not None else timedelta(**kwargs)
        if step < timedelta(0):
            raise ValueError("ManualClock cannot move backwards")
        self._now += step
        return self._now
