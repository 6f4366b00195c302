import threading
from datetime import datetime, timezone
from typing import Callable, NamedTuple, Optional


class StatusSnapshot(NamedTuple):
    """Immutable view of the last successful size observation."""
    last_instance_size: int
    last_check: Optional[datetime]

    def to_dict(self) -> dict:
        last_check = None
        if self.last_check is not None:
            last_check = self.last_check.isoformat().replace('+00:00', 'Z')
        return {
            'last_instance_size': self.last_instance_size,
            'last_check': last_check
        }


class ScalingState:
    """
    Last observed instance count and when it was observed.

    Written by the polling loop and read by the status endpoint thread, so
    every access goes through a lock and readers only ever see snapshots.
    """

    def __init__(self, clock: Callable[[], datetime] = None):
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._snapshot = StatusSnapshot(last_instance_size=0, last_check=None)

    def record(self, size: int) -> StatusSnapshot:
        snapshot = StatusSnapshot(last_instance_size=size, last_check=self._clock())
        with self._lock:
            self._snapshot = snapshot
        return snapshot

    def snapshot(self) -> StatusSnapshot:
        with self._lock:
            return self._snapshot
