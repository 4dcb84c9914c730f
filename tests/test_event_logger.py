# Event Logger Tests

import json

from neckcoach import EventLogger, StatusChanged, TrackingChanged


class TestEventLogger:
    """Tests for JSONL event logging."""

    def test_log_event(self, tmp_path):
        logger = EventLogger(str(tmp_path / "events.jsonl"))
        logger.log_event("custom", {"value": 3}, unix_time=1700000000.0)

        lines = (tmp_path / "events.jsonl").read_text().splitlines()
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert record["event_type"] == "custom"
        assert record["unix_time"] == 1700000000.0
        assert record["payload"] == {"value": 3}
        assert "timestamp" in record

    def test_log_session_events(self, tmp_path):
        logger = EventLogger(str(tmp_path / "events.jsonl"))
        events = [
            TrackingChanged(tracking=True, reason="start", unix_time=10.0),
            StatusChanged(from_direction=None, to_direction="Neutral",
                          deviation_angle=0.5, yaw_deviation=0.0, unix_time=11.0)
        ]

        assert logger.log_session_events(events) == 2

        recent = logger.get_recent_events()
        assert [r["event_type"] for r in recent] == ["tracking_changed", "status_changed"]
        assert recent[1]["unix_time"] == 11.0
        assert recent[1]["payload"]["to_direction"] == "Neutral"
        assert "event_type" not in recent[1]["payload"]

    def test_recent_events_limit(self, tmp_path):
        logger = EventLogger(str(tmp_path / "events.jsonl"))
        for i in range(10):
            logger.log_event("tick", {"i": i})

        recent = logger.get_recent_events(limit=3)
        assert [r["payload"]["i"] for r in recent] == [7, 8, 9]

    def test_skips_corrupt_lines(self, tmp_path):
        log_path = tmp_path / "events.jsonl"
        logger = EventLogger(str(log_path))
        logger.log_event("first")
        with open(log_path, "a") as f:
            f.write("garbage\n")
        logger.log_event("second")

        assert [r["event_type"] for r in logger.get_recent_events()] == ["first", "second"]

    def test_missing_log(self, tmp_path):
        logger = EventLogger(str(tmp_path / "nested" / "events.jsonl"))
        assert logger.get_recent_events() == []

    def test_purge(self, tmp_path):
        logger = EventLogger(str(tmp_path / "events.jsonl"))
        logger.log_event("x")
        logger.purge_logs()
        assert logger.get_recent_events() == []
