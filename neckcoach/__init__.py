"""
NeckCoach Core Module
Neck posture estimation and good/bad posture time accounting from head motion.
"""

from .posture_types import (
    PostureDirection,
    PostureStatus,
    PostureStats,
    OrientationSample,
    HourlyData,
    TimeRange
)
from .config import EstimatorConfig, AccountingConfig
from .calibration import CalibrationRoutine, CalibrationBaseline
from .smoothing import SmoothingWindow
from .estimator import PostureEstimator, EstimatorState, SampleOutcome
from .accountant import PostureTimeAccountant, format_duration
from .events import (
    EventChannel,
    SessionEvent,
    StatusChanged,
    CalibrationProgress,
    ConnectionChanged,
    TrackingChanged
)
from .ticker import ThreadTicker, ManualTicker, ManualClock
from .session import PostureSession, SessionSnapshot
from .status_bus import StatusBus, create_status_from_session, read_status
from .event_logger import EventLogger
from .sample_source import MotionSegment, simulated_samples, load_replay, save_replay

__all__ = [
    "PostureDirection",
    "PostureStatus",
    "PostureStats",
    "OrientationSample",
    "HourlyData",
    "TimeRange",
    "EstimatorConfig",
    "AccountingConfig",
    "CalibrationRoutine",
    "CalibrationBaseline",
    "SmoothingWindow",
    "PostureEstimator",
    "EstimatorState",
    "SampleOutcome",
    "PostureTimeAccountant",
    "format_duration",
    "EventChannel",
    "SessionEvent",
    "StatusChanged",
    "CalibrationProgress",
    "ConnectionChanged",
    "TrackingChanged",
    "ThreadTicker",
    "ManualTicker",
    "ManualClock",
    "PostureSession",
    "SessionSnapshot",
    "StatusBus",
    "create_status_from_session",
    "read_status",
    "EventLogger",
    "MotionSegment",
    "simulated_samples",
    "load_replay",
    "save_replay",
]
