"""
Status Bus - IPC bridge for live status updates.

Publishes the current session snapshot to storage/status.json for UI consumption.
A snapshot is only rewritten when the session has changed since the last
write, or when the file would otherwise look stale to readers.
"""

import json
import os
import time
import threading
from typing import Optional, Dict, Any, Callable
from pathlib import Path

from .session import PostureSession


SnapshotProvider = Callable[[], Optional[Dict[str, Any]]]


class StatusBus:
    """
    Background publisher that writes session status to a JSON file.

    Thread-safe, atomic writes, best-effort delivery.
    """

    def __init__(
        self,
        status_file: str = "storage/status.json",
        update_interval_sec: float = 1.0,
        heartbeat_sec: float = 2.0
    ):
        """
        Initialize status bus.

        Args:
            status_file: Path to status JSON file
            update_interval_sec: How often to check the session (default: 1 Hz)
            heartbeat_sec: Rewrite an unchanged snapshot after this long, so
                readers with a staleness check (read_status) still see it live
        """
        self.status_file = Path(status_file)
        self.status_file.parent.mkdir(parents=True, exist_ok=True)

        self.update_interval_sec = update_interval_sec
        self.heartbeat_sec = heartbeat_sec

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._snapshot_provider: Optional[SnapshotProvider] = None

        self._last_updated_at: Optional[float] = None
        self._last_write_time = 0.0
        self.write_count = 0

        self._error_count = 0
        self._last_error_time = 0.0

    def set_snapshot_provider(self, provider: SnapshotProvider):
        """
        Set the callback that provides status dictionaries.

        Args:
            provider: Function returning a session status dict (with
                "updated_at") or None when there is nothing to publish
        """
        self._snapshot_provider = provider

    def start(self):
        """Start the publisher thread."""
        if self._thread and self._thread.is_alive():
            return

        if not self._snapshot_provider:
            raise ValueError("Must set snapshot provider before starting")

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._publish_loop, daemon=True)
        self._thread.start()

    def stop(self):
        """Stop the publisher thread."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2.0)
            self._thread = None

    def publish_now(self, force: bool = True) -> bool:
        """
        Publish one snapshot synchronously.

        Args:
            force: Write even if the session has not changed

        Returns:
            True if a snapshot was written
        """
        if not self._snapshot_provider:
            raise ValueError("Must set snapshot provider before publishing")

        data = self._snapshot_provider()
        if not data:
            return False

        updated_at = data.get("updated_at")
        now = time.time()
        unchanged = updated_at is not None and updated_at == self._last_updated_at
        if not force and unchanged and now - self._last_write_time < self.heartbeat_sec:
            return False

        self._write_snapshot(data)
        self._last_updated_at = updated_at
        self._last_write_time = now
        self.write_count += 1
        return True

    def _publish_loop(self):
        """Publisher loop (runs in background thread)."""
        delay = 0.0
        while not self._stop_event.wait(delay):
            try:
                self.publish_now(force=False)
                self._error_count = 0
                delay = self.update_interval_sec
            except Exception as e:
                # Best-effort: log error but keep running
                self._error_count += 1
                current_time = time.time()

                # Only log errors occasionally to avoid spam
                if current_time - self._last_error_time > 10.0:
                    print(f"[STATUS_BUS] Error publishing status: {e}")
                    self._last_error_time = current_time

                # Exponential backoff on repeated errors
                if self._error_count > 3:
                    delay = min(max(delay, self.update_interval_sec) * 2, 30.0)
                else:
                    delay = self.update_interval_sec

    def _write_snapshot(self, data: Dict[str, Any]):
        """Write to a temp file, then os.replace() it over the status file."""
        temp_file = self.status_file.with_suffix('.tmp')
        with open(temp_file, 'w') as f:
            json.dump(data, f, indent=2)

        os.replace(temp_file, self.status_file)


def create_status_from_session(session: PostureSession) -> Dict[str, Any]:
    """
    Build the status.json payload from a session.

    Adds the hourly chart data and timestamp to the snapshot dictionary.
    """
    snapshot = session.snapshot()
    data = snapshot.to_dict()
    data["ts_unix"] = time.time()
    data["hourly"] = [
        {"hour": h.hour, "good_time": h.good_time, "bad_time": h.bad_time}
        for h in session.hourly_breakdown()
    ]
    return data


def read_status(
    status_file: str = "storage/status.json",
    max_age_sec: Optional[float] = 3.0
):
    """
    Read the published status.

    Args:
        status_file: Path to status JSON file
        max_age_sec: Treat older files as stale (None disables the check)

    Returns:
        (status dict or None, error string or None)
    """
    status_path = Path(status_file)
    if not status_path.exists():
        return None, "File not found"

    try:
        if max_age_sec is not None:
            age = time.time() - status_path.stat().st_mtime
            if age > max_age_sec:
                return None, f"Stale ({age:.1f}s old)"

        with open(status_path, 'r') as f:
            return json.load(f), None
    except (OSError, json.JSONDecodeError) as e:
        return None, str(e)
