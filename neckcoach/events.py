"""
Session events and the channel the host drains them from.
"""

import queue
import time
from dataclasses import dataclass, asdict, field
from typing import Dict, Any, List, Optional


@dataclass(frozen=True)
class SessionEvent:
    """Base class for events emitted by a PostureSession."""

    @property
    def event_type(self) -> str:
        return _EVENT_TYPES.get(type(self), "session_event")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        data["event_type"] = self.event_type
        return data


@dataclass(frozen=True)
class StatusChanged(SessionEvent):
    """Classified direction changed (or first classification after calibration)."""
    from_direction: Optional[str]
    to_direction: str
    deviation_angle: float
    yaw_deviation: float
    unix_time: float = field(default_factory=time.time)


@dataclass(frozen=True)
class CalibrationProgress(SessionEvent):
    """Calibration advanced by one sample, or finished."""
    progress_percent: int
    samples_captured: int
    complete: bool = False
    pitch_baseline: Optional[float] = None
    yaw_baseline: Optional[float] = None
    unix_time: float = field(default_factory=time.time)


@dataclass(frozen=True)
class ConnectionChanged(SessionEvent):
    """Sensor connected or disconnected."""
    connected: bool
    unix_time: float = field(default_factory=time.time)


@dataclass(frozen=True)
class TrackingChanged(SessionEvent):
    """Tracking started or stopped."""
    tracking: bool
    reason: str = ""
    unix_time: float = field(default_factory=time.time)


_EVENT_TYPES = {
    StatusChanged: "status_changed",
    CalibrationProgress: "calibration_progress",
    ConnectionChanged: "connection_changed",
    TrackingChanged: "tracking_changed",
}


class EventChannel:
    """
    Bounded, thread-safe event queue.

    The session publishes from its own thread; the host drains whenever it
    likes. When full, the oldest event is dropped to make room.
    """

    def __init__(self, maxsize: int = 1000):
        """
        Initialize event channel.

        Args:
            maxsize: Maximum number of undrained events kept
        """
        self.maxsize = maxsize
        self._queue: "queue.Queue[SessionEvent]" = queue.Queue(maxsize=maxsize)
        self.dropped_count = 0

    def publish(self, event: SessionEvent):
        """Enqueue an event without blocking."""
        while True:
            try:
                self._queue.put_nowait(event)
                return
            except queue.Full:
                try:
                    self._queue.get_nowait()
                    self.dropped_count += 1
                except queue.Empty:
                    pass

    def drain(self, limit: Optional[int] = None) -> List[SessionEvent]:
        """
        Remove and return pending events, oldest first.

        Args:
            limit: Maximum number of events to return (all if None)
        """
        events = []
        while limit is None or len(events) < limit:
            try:
                events.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return events

    def pending(self) -> int:
        return self._queue.qsize()
