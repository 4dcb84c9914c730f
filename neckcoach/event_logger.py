"""
Event logger for posture session events.

Logs status changes, calibration, tracking and connection events.
"""

import json
import time
from pathlib import Path
from typing import Dict, Any, Optional, Iterable
from datetime import datetime

from .events import SessionEvent


class EventLogger:
    """
    Logger for session events.

    Logs to JSONL format (one JSON object per line).
    """

    def __init__(self, log_path: Optional[str] = None):
        """
        Initialize event logger.

        Args:
            log_path: Path to log file (default: storage/events.jsonl)
        """
        if log_path is None:
            log_path = "storage/events.jsonl"

        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log_event(
        self,
        event_type: str,
        payload: Optional[Dict[str, Any]] = None,
        unix_time: Optional[float] = None
    ):
        """
        Append one event.

        Args:
            event_type: Type of event (status_changed, tracking_changed, etc.)
            payload: Event fields
            unix_time: Event time (default: now)
        """
        unix_time = unix_time if unix_time is not None else time.time()
        event = {
            "timestamp": datetime.fromtimestamp(unix_time).isoformat(),
            "unix_time": unix_time,
            "event_type": event_type,
            "payload": payload or {}
        }

        with open(self.log_path, "a") as f:
            f.write(json.dumps(event) + "\n")

    def log_session_event(self, event: SessionEvent):
        """Log a drained session event."""
        data = event.to_dict()
        event_type = data.pop("event_type")
        unix_time = data.pop("unix_time", None)
        self.log_event(event_type, payload=data, unix_time=unix_time)

    def log_session_events(self, events: Iterable[SessionEvent]) -> int:
        """Log a batch of session events; returns how many were written."""
        count = 0
        for event in events:
            self.log_session_event(event)
            count += 1
        return count

    def get_recent_events(self, limit: int = 100) -> list:
        """
        Get recent events from log.

        Args:
            limit: Maximum number of events to return

        Returns:
            List of event dictionaries
        """
        if not self.log_path.exists():
            return []

        events = []
        with open(self.log_path, "r") as f:
            for line in f:
                try:
                    events.append(json.loads(line.strip()))
                except json.JSONDecodeError:
                    continue

        return events[-limit:]

    def purge_logs(self):
        """Delete all logged events."""
        if self.log_path.exists():
            self.log_path.unlink()
