"""
Posture session: the host-facing owner of one estimator and one accountant.

All mutation happens under a single lock, so sensor callbacks and the ticker
may arrive on different threads. Readers get immutable snapshots. Events are
published while the lock is held, so the channel order matches the order of
the state changes.
"""

import math
import time
import threading
from dataclasses import dataclass, field
from typing import Optional, Callable, Dict, Any, List, Union

from .config import EstimatorConfig, AccountingConfig
from .estimator import PostureEstimator, EstimatorState, SampleOutcome
from .accountant import PostureTimeAccountant
from .calibration import CalibrationBaseline
from .posture_types import PostureStatus, PostureStats, HourlyData, TimeRange
from .events import (
    EventChannel,
    StatusChanged,
    CalibrationProgress,
    ConnectionChanged,
    TrackingChanged
)
from .ticker import ThreadTicker, ManualTicker


Clock = Callable[[], float]
Ticker = Union[ThreadTicker, ManualTicker]


@dataclass(frozen=True)
class SessionSnapshot:
    """
    Point-in-time view of a session for display.

    Replaced as a whole on every mutation; never modified in place.
    """
    is_connected: bool = False
    is_tracking: bool = False
    is_calibrating: bool = False
    calibration_progress_percent: int = 0
    estimator_state: str = EstimatorState.IDLE.value
    current_status: PostureStatus = field(default_factory=PostureStatus.neutral)
    current_neck_angle: float = 0.0
    stats: PostureStats = field(default_factory=PostureStats)
    current_good_time: float = 0.0
    current_bad_time: float = 0.0
    baseline: Optional[CalibrationBaseline] = None
    updated_at: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_connected": self.is_connected,
            "is_tracking": self.is_tracking,
            "is_calibrating": self.is_calibrating,
            "calibration_progress_percent": self.calibration_progress_percent,
            "estimator_state": self.estimator_state,
            "current_status": self.current_status.to_dict(),
            "position_label": self.current_status.direction.position_label,
            "current_neck_angle": self.current_neck_angle,
            "stats": self.stats.to_dict(),
            "current_good_time": self.current_good_time,
            "current_bad_time": self.current_bad_time,
            "baseline": self.baseline.to_dict() if self.baseline else None,
            "updated_at": self.updated_at
        }


class PostureSession:
    """
    Tracking session wiring raw samples through estimator and accountant.

    Usage:
        session = PostureSession(ticker=ThreadTicker())
        session.on_connect()
        session.start_tracking()
        session.submit_sample(pitch, yaw, timestamp)
        snapshot = session.snapshot()
        events = session.events.drain()
    """

    def __init__(
        self,
        estimator_config: Optional[EstimatorConfig] = None,
        accounting_config: Optional[AccountingConfig] = None,
        clock: Optional[Clock] = None,
        ticker: Optional[Ticker] = None,
        channel: Optional[EventChannel] = None
    ):
        """
        Initialize session.

        Args:
            estimator_config: Calibration/classification settings (defaults if None)
            accounting_config: Time accounting settings (defaults if None)
            clock: Time source in seconds (default: time.time)
            ticker: Periodic tick source started/stopped with tracking (optional)
            channel: Event channel (creates one if None)
        """
        self.estimator = PostureEstimator(estimator_config)
        self.accountant = PostureTimeAccountant(accounting_config)
        self.clock = clock or time.time
        self.ticker = ticker
        self.events = channel or EventChannel()

        self._lock = threading.Lock()
        self._connected = False
        self._tracking = False
        self._last_direction: Optional[str] = None
        self._snapshot = SessionSnapshot(updated_at=self.clock())

    @property
    def is_tracking(self) -> bool:
        with self._lock:
            return self._tracking

    @property
    def is_connected(self) -> bool:
        with self._lock:
            return self._connected

    def snapshot(self) -> SessionSnapshot:
        """Latest immutable snapshot (safe from any thread)."""
        return self._snapshot

    def stats(self, time_range: TimeRange = TimeRange.DAY) -> PostureStats:
        with self._lock:
            return self.accountant.stats_for(time_range)

    def hourly_breakdown(self, time_range: TimeRange = TimeRange.DAY) -> List[HourlyData]:
        with self._lock:
            return self.accountant.hourly_breakdown(time_range, now=self.clock())

    def start_tracking(self) -> bool:
        """
        Start a tracking session: calibrate, then classify.

        Returns:
            True if tracking started, False if already tracking
        """
        with self._lock:
            if self._tracking:
                return False
            self._tracking = True
            self._last_direction = None
            self.estimator.start_tracking()
            self.accountant.start_tracking(self.clock())
            self._publish_snapshot()
            self.events.publish(TrackingChanged(tracking=True, reason="start"))
            self.events.publish(CalibrationProgress(progress_percent=0, samples_captured=0))

        print("[SESSION] Tracking started - calibrating, hold a neutral posture")
        # Never under the lock: stopping a ThreadTicker joins a tick that may be waiting on it
        if self.ticker:
            self.ticker.start(self.tick)
        return True

    def stop_tracking(self, reason: str = "stop") -> bool:
        """
        Stop tracking; samples arriving afterwards are dropped.

        Returns:
            True if tracking stopped, False if it was not running
        """
        if self.ticker:
            self.ticker.stop()

        with self._lock:
            if not self._tracking:
                return False
            self._stop_locked()
            self.events.publish(TrackingChanged(tracking=False, reason=reason))

        print(f"[SESSION] Tracking stopped ({reason})")
        return True

    def recalibrate(self) -> bool:
        """
        Discard the baseline and calibrate again.

        Returns:
            True if recalibration started, False when not tracking
        """
        with self._lock:
            if not self._tracking:
                return False
            self.estimator.recalibrate()
            self._last_direction = None
            self._publish_snapshot()
            self.events.publish(CalibrationProgress(progress_percent=0, samples_captured=0))

        print("[SESSION] Recalibrating - hold a neutral posture")
        return True

    def on_connect(self):
        """Sensor connected."""
        with self._lock:
            changed = not self._connected
            self._connected = True
            self._publish_snapshot()
            if changed:
                self.events.publish(ConnectionChanged(connected=True))

        if changed:
            print("[SESSION] Sensor connected")

    def on_disconnect(self):
        """Sensor disconnected: reset the estimator and stop tracking."""
        if self.ticker:
            self.ticker.stop()

        with self._lock:
            changed = self._connected
            was_tracking = self._tracking
            self._connected = False
            self.estimator.reset()
            if was_tracking:
                self._stop_locked()
            else:
                self._publish_snapshot()
            if changed:
                self.events.publish(ConnectionChanged(connected=False))
            if was_tracking:
                self.events.publish(TrackingChanged(tracking=False, reason="disconnect"))

        if changed:
            print("[SESSION] Sensor disconnected")

    def submit_sample(self, pitch: float, yaw: float, timestamp: Optional[float] = None) -> SampleOutcome:
        """
        Feed one orientation reading.

        Non-finite readings and readings outside a tracking session are
        dropped without touching any state.

        Args:
            pitch: Raw pitch in degrees
            yaw: Raw yaw in degrees
            timestamp: Sample time in seconds (defaults to the session clock)

        Returns:
            SampleOutcome from the estimator
        """
        if not (math.isfinite(pitch) and math.isfinite(yaw)):
            return SampleOutcome.REJECTED

        with self._lock:
            if not self._tracking:
                return SampleOutcome.IGNORED

            outcome = self.estimator.submit_sample(pitch, yaw, timestamp)

            if outcome in (SampleOutcome.CALIBRATING, SampleOutcome.CALIBRATED):
                self.events.publish(self._calibration_event(outcome))
            elif outcome == SampleOutcome.CLASSIFIED:
                status = self.estimator.current_status
                self.accountant.on_classification(status, self.clock())
                direction = status.direction.value
                if direction != self._last_direction:
                    self.events.publish(StatusChanged(
                        from_direction=self._last_direction,
                        to_direction=direction,
                        deviation_angle=status.deviation_angle,
                        yaw_deviation=status.yaw_deviation
                    ))
                    self._last_direction = direction

            if outcome != SampleOutcome.IGNORED:
                self._publish_snapshot()

        return outcome

    def tick(self, now: Optional[float] = None):
        """Periodic tick: refresh the live streak counter."""
        with self._lock:
            if not self._tracking:
                return
            self.accountant.on_tick(now if now is not None else self.clock())
            self._publish_snapshot()

    def _calibration_event(self, outcome: SampleOutcome) -> CalibrationProgress:
        if outcome == SampleOutcome.CALIBRATED:
            baseline = self.estimator.baseline
            return CalibrationProgress(
                progress_percent=100,
                samples_captured=baseline.sample_count,
                complete=True,
                pitch_baseline=baseline.pitch_baseline,
                yaw_baseline=baseline.yaw_baseline
            )
        return CalibrationProgress(
            progress_percent=self.estimator.calibration_progress_percent,
            samples_captured=self.estimator.calibration.sample_count
        )

    def _stop_locked(self):
        self._tracking = False
        self._last_direction = None
        self.estimator.stop_tracking()
        self.accountant.stop_tracking()
        self._publish_snapshot()

    def _publish_snapshot(self):
        """Build and swap in a new snapshot (caller holds the lock)."""
        self._snapshot = SessionSnapshot(
            is_connected=self._connected,
            is_tracking=self._tracking,
            is_calibrating=self.estimator.is_calibrating,
            calibration_progress_percent=self.estimator.calibration_progress_percent,
            estimator_state=self.estimator.state.value,
            current_status=self.estimator.current_status,
            current_neck_angle=self.estimator.current_neck_angle,
            stats=self.accountant.stats_for(TimeRange.DAY),
            current_good_time=self.accountant.current_good_time,
            current_bad_time=self.accountant.current_bad_time,
            baseline=self.estimator.baseline,
            updated_at=self.clock()
        )
