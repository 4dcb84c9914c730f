"""
Posture value types shared by the estimator, accountant and host.

All values here are immutable; the session hands them to readers as-is.
"""

import math
from enum import Enum
from dataclasses import dataclass, asdict
from typing import Dict, Any


class PostureDirection(Enum):
    """Classified head direction relative to the calibrated baseline."""
    NEUTRAL = "Neutral"
    FORWARD = "Forward"
    BACKWARD = "Backward"
    LEFT = "Left"
    RIGHT = "Right"

    @property
    def is_good_posture(self) -> bool:
        return self == PostureDirection.NEUTRAL

    @property
    def position_label(self) -> str:
        """Human-readable position, as shown in the menu and dashboard."""
        return _POSITION_LABELS[self]


_POSITION_LABELS = {
    PostureDirection.NEUTRAL: "Good Posture",
    PostureDirection.FORWARD: "Looking Down",
    PostureDirection.BACKWARD: "Looking Up",
    PostureDirection.LEFT: "Looking Left",
    PostureDirection.RIGHT: "Looking Right",
}


class TimeRange(Enum):
    """Aggregation granularity requested by the dashboard."""
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class OrientationSample:
    """Single attitude reading from the head-mounted sensor."""
    pitch: float  # degrees, forward/back tilt
    yaw: float  # degrees, left/right turn
    timestamp: float  # seconds

    def is_finite(self) -> bool:
        return math.isfinite(self.pitch) and math.isfinite(self.yaw)


@dataclass(frozen=True)
class PostureStatus:
    """
    Classification of one sample.

    deviation_angle is the magnitude of the smoothed pitch deviation;
    yaw_deviation keeps its sign (positive = turned left).
    """
    deviation_angle: float
    direction: PostureDirection
    raw_angle: float
    yaw_deviation: float = 0.0

    @classmethod
    def neutral(cls) -> 'PostureStatus':
        return cls(deviation_angle=0.0, direction=PostureDirection.NEUTRAL, raw_angle=0.0, yaw_deviation=0.0)

    @property
    def is_good_posture(self) -> bool:
        return self.direction.is_good_posture

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["direction"] = self.direction.value
        return data


@dataclass(frozen=True)
class PostureStats:
    """Good/bad posture durations in seconds."""
    good_posture_time: float = 0.0
    bad_posture_time: float = 0.0

    @property
    def total_posture_time(self) -> float:
        return self.good_posture_time + self.bad_posture_time

    @property
    def good_posture_percentage(self) -> float:
        total = self.total_posture_time
        if total <= 0:
            return 0.0
        return (self.good_posture_time / total) * 100

    def to_dict(self) -> Dict[str, float]:
        return {
            "good_posture_time": self.good_posture_time,
            "bad_posture_time": self.bad_posture_time,
            "total_posture_time": self.total_posture_time,
            "good_posture_percentage": self.good_posture_percentage
        }


@dataclass(frozen=True)
class HourlyData:
    """One bar of the dashboard chart."""
    hour: int
    good_time: float
    bad_time: float
