"""
Periodic tick sources for posture time accounting.

ThreadTicker drives a live session from a background thread. ManualTicker and
ManualClock advance virtual time in exact interval steps for tests and replays.
"""

import time
import threading
from typing import Optional, Callable


TickCallback = Callable[[], None]


class ManualClock:
    """Clock whose time only moves when told to."""

    def __init__(self, start: float = 0.0):
        self._now = start

    def __call__(self) -> float:
        return self._now

    def set(self, now: float):
        self._now = now

    def advance(self, seconds: float) -> float:
        self._now += seconds
        return self._now


class ThreadTicker:
    """
    Background thread that invokes a callback at a fixed interval.

    Best-effort: callback errors are reported and the loop keeps running.
    """

    def __init__(self, interval_sec: float = 0.1):
        """
        Initialize ticker.

        Args:
            interval_sec: Time between ticks (default: 0.1s = 10 Hz)
        """
        self.interval_sec = interval_sec
        self._callback: Optional[TickCallback] = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._error_count = 0
        self._last_error_time = 0.0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, callback: TickCallback):
        """Start ticking; a running ticker is restarted with the new callback."""
        self.stop()
        self._callback = callback
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._tick_loop, daemon=True)
        self._thread.start()

    def stop(self):
        """Stop ticking and wait for the thread to exit."""
        self._stop_event.set()
        thread = self._thread
        self._thread = None
        if thread and thread is not threading.current_thread():
            thread.join(timeout=2.0)

    def _tick_loop(self):
        next_tick = time.monotonic() + self.interval_sec
        while not self._stop_event.wait(max(0.0, next_tick - time.monotonic())):
            next_tick += self.interval_sec
            try:
                self._callback()
                self._error_count = 0
            except Exception as e:
                self._error_count += 1
                current_time = time.time()
                # Only log errors occasionally to avoid spam
                if current_time - self._last_error_time > 10.0:
                    print(f"[TICKER] Error in tick callback: {e}")
                    self._last_error_time = current_time


class ManualTicker:
    """
    Ticker driven by explicit time advancement.

    advance() moves a target time forward and fires the callback once for
    every whole interval reached while started; any partial interval still
    moves the clock and counts toward the next tick. Tick times are computed
    as origin plus step count times interval, so they do not drift over
    long runs.
    """

    # Absorbs float error when repeated advances sum to a whole interval
    _EPSILON = 1e-9

    def __init__(self, clock: ManualClock, interval_sec: float = 0.1):
        self.clock = clock
        self.interval_sec = interval_sec
        self._callback: Optional[TickCallback] = None
        self._origin = clock()
        self._target = 0.0
        self._steps = 0
        self.tick_count = 0

    @property
    def running(self) -> bool:
        return self._callback is not None

    def start(self, callback: TickCallback):
        self._callback = callback
        self._origin = self.clock()
        self._target = 0.0
        self._steps = 0

    def stop(self):
        self._callback = None

    def advance(self, seconds: float) -> int:
        """
        Move time forward by `seconds`, ticking at every interval boundary.

        Returns:
            Number of ticks delivered
        """
        if self._callback is None:
            self.clock.advance(seconds)
            return 0

        self._target += seconds
        delivered = 0
        while (self._steps + 1) * self.interval_sec <= self._target + self._EPSILON:
            self._steps += 1
            self.clock.set(self._origin + self._steps * self.interval_sec)
            callback = self._callback
            if callback is None:
                break
            callback()
            delivered += 1
        self.tick_count += delivered

        step_time = self._steps * self.interval_sec
        if abs(self._target - step_time) > self._EPSILON:
            self.clock.set(self._origin + self._target)
        return delivered
