"""
Orientation sample sources for development and replay.

The real sensor feed belongs to the host; these stand in for it:
- simulated_samples(): scripted head motion with Gaussian sensor noise
- load_replay(): recorded samples from CSV or JSONL
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence

import numpy as np
import pandas as pd

from .posture_types import OrientationSample


REPLAY_COLUMNS = ["timestamp", "pitch", "yaw"]


@dataclass(frozen=True)
class MotionSegment:
    """Hold a head position (offsets from neutral, degrees) for a duration."""
    duration_sec: float
    pitch_offset: float = 0.0
    yaw_offset: float = 0.0


# Neutral long enough to calibrate, then a tour of every direction
DEFAULT_SCRIPT = [
    MotionSegment(10.0),
    MotionSegment(20.0, pitch_offset=-12.0),  # looking down
    MotionSegment(30.0),
    MotionSegment(5.0, yaw_offset=25.0),  # looking left
    MotionSegment(5.0, yaw_offset=-25.0),  # looking right
    MotionSegment(10.0, pitch_offset=10.0),  # looking up
    MotionSegment(40.0),
]


def simulated_samples(
    script: Optional[Sequence[MotionSegment]] = None,
    rate_hz: float = 10.0,
    neutral_pitch: float = -8.0,
    neutral_yaw: float = 2.0,
    noise_deg: float = 0.5,
    start_time: float = 0.0,
    seed: Optional[int] = None,
    repeat: bool = False
) -> Iterator[OrientationSample]:
    """
    Generate scripted head motion.

    Args:
        script: Motion segments to play (default: DEFAULT_SCRIPT)
        rate_hz: Samples per second
        neutral_pitch: Pitch of the user's neutral head position
        neutral_yaw: Yaw of the user's neutral head position
        noise_deg: Standard deviation of Gaussian noise on each axis
        start_time: Timestamp of the first sample
        seed: Random seed for reproducible noise
        repeat: Loop the script forever

    Yields:
        OrientationSample at fixed intervals of 1 / rate_hz
    """
    if rate_hz <= 0:
        raise ValueError("rate_hz must be positive")

    script = list(script if script is not None else DEFAULT_SCRIPT)
    rng = np.random.default_rng(seed)
    index = 0

    while True:
        for segment in script:
            count = int(round(segment.duration_sec * rate_hz))
            noise = rng.normal(0.0, noise_deg, size=(count, 2)) if noise_deg > 0 else np.zeros((count, 2))
            for pitch_noise, yaw_noise in noise:
                yield OrientationSample(
                    pitch=float(neutral_pitch + segment.pitch_offset + pitch_noise),
                    yaw=float(neutral_yaw + segment.yaw_offset + yaw_noise),
                    timestamp=start_time + index / rate_hz
                )
                index += 1
        if not repeat:
            return


def load_replay(path: str) -> List[OrientationSample]:
    """
    Load recorded samples.

    Accepts CSV, or JSONL when the file ends in .jsonl. Rows are ordered by
    timestamp; non-finite angles are kept (the session rejects them).

    Raises:
        ValueError: if a required column is missing
    """
    replay_path = Path(path)
    if replay_path.suffix == ".jsonl":
        df = pd.read_json(replay_path, lines=True, convert_dates=False)
    else:
        df = pd.read_csv(replay_path)

    missing = [c for c in REPLAY_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Replay file {path} is missing columns: {', '.join(missing)}")

    df = df[REPLAY_COLUMNS].astype(float).sort_values("timestamp", kind="stable")
    return [
        OrientationSample(pitch=float(row.pitch), yaw=float(row.yaw), timestamp=float(row.timestamp))
        for row in df.itertuples(index=False)
    ]


def save_replay(samples: Sequence[OrientationSample], path: str):
    """Write samples as CSV in the replay format."""
    df = pd.DataFrame(
        [(s.timestamp, s.pitch, s.yaw) for s in samples],
        columns=REPLAY_COLUMNS
    )
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
