"""
Posture estimator: calibration, smoothing and direction classification.

Implements states: IDLE, CALIBRATING, ACTIVE
Uses a trimmed-mean baseline with fixed pitch/yaw thresholds.
"""

import math
from enum import Enum
from typing import Optional

from .config import EstimatorConfig
from .calibration import CalibrationRoutine, CalibrationBaseline
from .smoothing import SmoothingWindow
from .posture_types import PostureDirection, PostureStatus


class EstimatorState(Enum):
    """Estimator lifecycle states."""
    IDLE = "idle"
    CALIBRATING = "calibrating"
    ACTIVE = "active"


class SampleOutcome(Enum):
    """What a submitted sample did to the estimator."""
    IGNORED = "ignored"  # not tracking
    REJECTED = "rejected"  # non-finite angles
    CALIBRATING = "calibrating"  # added to calibration buffers
    CALIBRATED = "calibrated"  # completed calibration
    CLASSIFIED = "classified"  # produced a new PostureStatus


class PostureEstimator:
    """
    State machine turning raw pitch/yaw readings into posture classifications.

    States:
    - IDLE: Not tracking, samples are ignored
    - CALIBRATING: Collecting samples for the neutral baseline
    - ACTIVE: Classifying smoothed deviations from the baseline

    Classification precedence (first match wins):
    1. |yaw| above lateral threshold: LEFT (yaw > 0) or RIGHT
    2. |pitch| within neutral threshold: NEUTRAL
    3. pitch below -threshold: FORWARD (looking down)
    4. otherwise: BACKWARD (looking up)
    """

    def __init__(self, config: Optional[EstimatorConfig] = None):
        """
        Initialize estimator.

        Args:
            config: Estimator configuration (uses defaults if None)
        """
        self.config = config or EstimatorConfig()

        self.state = EstimatorState.IDLE
        self.baseline: Optional[CalibrationBaseline] = None
        self.calibration = CalibrationRoutine(self.config)

        self.pitch_window = SmoothingWindow(self.config.smoothing_window)
        self.yaw_window = SmoothingWindow(self.config.smoothing_window)

        self.current_status = PostureStatus.neutral()
        self.current_neck_angle = 0.0  # signed smoothed pitch deviation

    @property
    def is_calibrating(self) -> bool:
        return self.state == EstimatorState.CALIBRATING

    @property
    def calibration_progress_percent(self) -> int:
        """Calibration progress 0-100 (100 once a baseline exists)."""
        if self.state == EstimatorState.CALIBRATING:
            return self.calibration.progress_percent
        return 100 if self.baseline is not None else 0

    def start_tracking(self):
        """Begin a new session with a fresh calibration."""
        self._begin_calibration()

    def recalibrate(self):
        """Discard the baseline and calibrate again."""
        self._begin_calibration()

    def stop_tracking(self):
        """Stop tracking; equivalent to reset()."""
        self.reset()

    def reset(self):
        """Clear baseline, buffers and windows and return to IDLE."""
        self.state = EstimatorState.IDLE
        self._clear_signal_state()

    def submit_sample(self, pitch: float, yaw: float, timestamp: Optional[float] = None) -> SampleOutcome:
        """
        Feed one orientation reading.

        Args:
            pitch: Raw pitch in degrees
            yaw: Raw yaw in degrees
            timestamp: Sample time in seconds (informational)

        Returns:
            SampleOutcome describing the effect of the sample
        """
        if not (math.isfinite(pitch) and math.isfinite(yaw)):
            return SampleOutcome.REJECTED

        if self.state == EstimatorState.IDLE:
            return SampleOutcome.IGNORED

        if self.state == EstimatorState.CALIBRATING:
            return self._handle_calibration_sample(pitch, yaw)

        self.current_status = self._classify(pitch, yaw)
        return SampleOutcome.CLASSIFIED

    def _begin_calibration(self):
        self._clear_signal_state()
        self.state = EstimatorState.CALIBRATING

    def _clear_signal_state(self):
        self.baseline = None
        self.calibration.clear()
        self.pitch_window.clear()
        self.yaw_window.clear()
        self.current_status = PostureStatus.neutral()
        self.current_neck_angle = 0.0

    def _handle_calibration_sample(self, pitch: float, yaw: float) -> SampleOutcome:
        baseline = self.calibration.add_sample(pitch, yaw)
        if baseline is None:
            return SampleOutcome.CALIBRATING

        self.baseline = baseline
        self.state = EstimatorState.ACTIVE
        print(f"[CALIBRATION] Complete - pitch baseline {baseline.pitch_baseline:.2f}°, "
              f"yaw baseline {baseline.yaw_baseline:.2f}° ({baseline.sample_count} samples)")
        return SampleOutcome.CALIBRATED

    def _classify(self, pitch: float, yaw: float) -> PostureStatus:
        assert self.baseline is not None, "ACTIVE estimator has no baseline"

        smoothed_pitch = self.pitch_window.add(pitch - self.baseline.pitch_baseline)
        smoothed_yaw = self.yaw_window.add(yaw - self.baseline.yaw_baseline)
        self.current_neck_angle = smoothed_pitch

        return PostureStatus(
            deviation_angle=abs(smoothed_pitch),
            direction=self._direction_for(smoothed_pitch, smoothed_yaw),
            raw_angle=pitch,
            yaw_deviation=smoothed_yaw
        )

    def _direction_for(self, smoothed_pitch: float, smoothed_yaw: float) -> PostureDirection:
        if abs(smoothed_yaw) > self.config.lateral_threshold_deg:
            return PostureDirection.LEFT if smoothed_yaw > 0 else PostureDirection.RIGHT

        threshold = self.config.neutral_threshold_deg
        if abs(smoothed_pitch) <= threshold:
            return PostureDirection.NEUTRAL
        if smoothed_pitch < -threshold:
            return PostureDirection.FORWARD
        return PostureDirection.BACKWARD
