"""
Estimator and accounting configuration: calibration, smoothing and timing.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any


@dataclass
class EstimatorConfig:
    """
    Configuration for calibration and classification.

    Defaults:
    - 30 calibration samples (~3s at 10 Hz), trimmed 20% at each end
    - 5-sample smoothing window for pitch and yaw deviations
    - |pitch| <= 3° is neutral; |yaw| > 15° is a left/right turn
    """
    calibration_samples: int = 30
    trim_fraction: float = 0.2
    smoothing_window: int = 5
    neutral_threshold_deg: float = 3.0
    lateral_threshold_deg: float = 15.0

    def __post_init__(self):
        """Validate configuration parameters."""
        assert self.calibration_samples > 0, "calibration_samples must be positive"
        assert 0.0 <= self.trim_fraction < 0.5, "trim_fraction must be 0.0-0.5"
        assert self.trim_start_index < self.trim_end_index, "trim leaves no samples to average"
        assert self.smoothing_window > 0, "smoothing_window must be positive"
        assert self.neutral_threshold_deg >= 0, "neutral_threshold_deg must be >= 0"
        assert self.lateral_threshold_deg >= 0, "lateral_threshold_deg must be >= 0"

    @property
    def trim_start_index(self) -> int:
        """First sorted index kept by the trimmed mean."""
        return int(self.calibration_samples * self.trim_fraction)

    @property
    def trim_end_index(self) -> int:
        """Sorted index (exclusive) where the trimmed mean stops."""
        return self.calibration_samples - self.trim_start_index

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EstimatorConfig':
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class AccountingConfig:
    """
    Configuration for good/bad posture time accounting.

    All durations in seconds.
    """
    tick_interval_sec: float = 0.1  # 10 Hz live counter refresh
    rollover_sec: float = 60.0  # bank a full minute and restart the live counter
    streak_cap_sec: float = 60.0  # max credited when a streak closes

    def __post_init__(self):
        """Validate configuration parameters."""
        assert self.tick_interval_sec > 0, "tick_interval_sec must be positive"
        assert self.rollover_sec > 0, "rollover_sec must be positive"
        assert self.streak_cap_sec > 0, "streak_cap_sec must be positive"
        assert self.tick_interval_sec < self.rollover_sec, "tick interval must be < rollover"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AccountingConfig':
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)
