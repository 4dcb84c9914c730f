"""
Good/bad posture time accounting.

Tracks the current streak (time since posture last flipped between good and
bad) and banks completed time into session totals. A live streak is banked
one full minute at a time so the displayed current counter stays under a
minute.
"""

import time
from datetime import datetime
from typing import Optional, List

from .config import AccountingConfig
from .posture_types import PostureStatus, PostureStats, HourlyData, TimeRange


def format_duration(seconds: float) -> str:
    """Format seconds as '3m 5s', or '5s' under a minute."""
    minutes = int(seconds) // 60
    remaining_seconds = int(seconds) % 60
    if minutes > 0:
        return f"{minutes}m {remaining_seconds}s"
    return f"{remaining_seconds}s"


class PostureTimeAccountant:
    """
    Accumulates good vs bad posture time for one tracking session.

    Totals only change at streak boundaries (posture flips good <-> bad)
    and on ticks that cross the rollover period; in between, the running
    streak is exposed as current_good_time / current_bad_time.
    """

    def __init__(self, config: Optional[AccountingConfig] = None):
        """
        Initialize accountant.

        Args:
            config: Accounting configuration (uses defaults if None)
        """
        self.config = config or AccountingConfig()

        self.is_tracking = False
        self.current_streak_start: Optional[float] = None
        self.current_streak_is_good: Optional[bool] = None

        self.good_total = 0.0
        self.bad_total = 0.0
        self.current_good_time = 0.0
        self.current_bad_time = 0.0

    def start_tracking(self, now: Optional[float] = None):
        """Reset counters and open the session."""
        self._reset_counters()
        self.is_tracking = True
        self.current_streak_start = now if now is not None else time.time()
        print("[ACCOUNT] Tracking started")

    def stop_tracking(self):
        """Reset counters and close the session."""
        was_tracking = self.is_tracking
        self._reset_counters()
        self.is_tracking = False
        self.current_streak_start = None
        if was_tracking:
            print("[ACCOUNT] Tracking stopped")

    def on_classification(self, status: PostureStatus, now: float):
        """
        Record a classified sample.

        Args:
            status: Latest posture classification
            now: Current time in seconds
        """
        if not self.is_tracking:
            return

        is_good = status.direction.is_good_posture
        if self.current_streak_is_good is not None and self.current_streak_is_good == is_good:
            return

        # Close out the previous streak, if any
        if self.current_streak_is_good is not None and self.current_streak_start is not None:
            credited = min(max(0.0, now - self.current_streak_start), self.config.streak_cap_sec)
            self._bank(self.current_streak_is_good, credited)

        self.current_streak_start = now
        self.current_streak_is_good = is_good
        self.current_good_time = 0.0
        self.current_bad_time = 0.0

    def on_tick(self, now: float):
        """
        Refresh the live streak counter and bank full rollover periods.

        Args:
            now: Current time in seconds
        """
        if not self.is_tracking or self.current_streak_is_good is None or self.current_streak_start is None:
            return

        elapsed = max(0.0, now - self.current_streak_start)

        if elapsed >= self.config.rollover_sec:
            self._bank(self.current_streak_is_good, self.config.rollover_sec)
            self.current_streak_start = now
            elapsed = 0.0
            label = "good" if self.current_streak_is_good else "bad"
            total = self.good_total if self.current_streak_is_good else self.bad_total
            print(f"[ACCOUNT] One minute of {label} posture completed! Total: {format_duration(total)}")

        if self.current_streak_is_good:
            self.current_good_time = elapsed
        else:
            self.current_bad_time = elapsed

    def stats_for(self, time_range: TimeRange = TimeRange.DAY) -> PostureStats:
        """
        Banked totals plus the live streak.

        Statistics are session-scoped, so every range reports the same totals.
        """
        good = self.good_total
        bad = self.bad_total

        if self.is_tracking:
            good += self.current_good_time
            bad += self.current_bad_time

        return PostureStats(good_posture_time=good, bad_posture_time=bad)

    def hourly_breakdown(self, time_range: TimeRange = TimeRange.DAY, now: Optional[float] = None) -> List[HourlyData]:
        """Single bar for the current local hour carrying the session totals."""
        moment = datetime.fromtimestamp(now if now is not None else time.time())
        stats = self.stats_for(time_range)
        return [HourlyData(hour=moment.hour, good_time=stats.good_posture_time, bad_time=stats.bad_posture_time)]

    def _bank(self, is_good: bool, seconds: float):
        if is_good:
            self.good_total += seconds
        else:
            self.bad_total += seconds

    def _reset_counters(self):
        self.current_streak_is_good = None
        self.good_total = 0.0
        self.bad_total = 0.0
        self.current_good_time = 0.0
        self.current_bad_time = 0.0
