"""
Calibration routine for capturing the neutral head position.

Collects a fixed number of pitch/yaw samples while the user holds a neutral
posture, then computes a trimmed mean of each axis as the baseline.
"""

from datetime import datetime
from dataclasses import dataclass, asdict
from typing import Optional, List, Dict, Any

import numpy as np

from .config import EstimatorConfig


@dataclass(frozen=True)
class CalibrationBaseline:
    """Calibrated neutral head position."""
    pitch_baseline: float  # degrees
    yaw_baseline: float  # degrees
    sample_count: int  # number of samples collected
    calibrated_at: str  # ISO timestamp

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


def trimmed_mean(values: List[float], start: int, end: int) -> float:
    """
    Mean of the sorted values in [start, end).

    With 30 samples and 20% trimmed at each end this averages sorted
    indices 6..23, so a cough or a glance during calibration does not
    shift the baseline.
    """
    ordered = np.sort(np.asarray(values, dtype=float))
    return float(np.mean(ordered[start:end]))


class CalibrationRoutine:
    """
    Accumulates calibration samples and produces a baseline.

    Sample-count driven: the caller feeds every reading and the routine
    reports completion once the configured count is reached.
    """

    def __init__(self, config: Optional[EstimatorConfig] = None):
        """
        Initialize calibration routine.

        Args:
            config: Estimator configuration (uses defaults if None)
        """
        self.config = config or EstimatorConfig()
        self.pitch_values: List[float] = []
        self.yaw_values: List[float] = []

    @property
    def sample_count(self) -> int:
        return len(self.pitch_values)

    @property
    def progress(self) -> float:
        """Fraction of required samples collected (0.0-1.0)."""
        return min(1.0, self.sample_count / self.config.calibration_samples)

    @property
    def progress_percent(self) -> int:
        return int(self.progress * 100)

    def add_sample(self, pitch: float, yaw: float) -> Optional[CalibrationBaseline]:
        """
        Add one reading.

        Args:
            pitch: Raw pitch in degrees
            yaw: Raw yaw in degrees

        Returns:
            CalibrationBaseline once enough samples are collected, None otherwise
        """
        self.pitch_values.append(pitch)
        self.yaw_values.append(yaw)

        if self.sample_count < self.config.calibration_samples:
            return None

        baseline = self._compute_baseline()
        self.clear()
        return baseline

    def _compute_baseline(self) -> CalibrationBaseline:
        start = self.config.trim_start_index
        end = self.config.trim_end_index

        return CalibrationBaseline(
            pitch_baseline=trimmed_mean(self.pitch_values, start, end),
            yaw_baseline=trimmed_mean(self.yaw_values, start, end),
            sample_count=self.sample_count,
            calibrated_at=datetime.now().isoformat()
        )

    def clear(self):
        """Discard collected samples."""
        self.pitch_values = []
        self.yaw_values = []
