# Dev Runner Tests

import pytest

from dev_runner import run_fast, format_status_line, describe_event
from neckcoach import (
    PostureSession,
    ManualClock,
    ManualTicker,
    MotionSegment,
    EventLogger,
    StatusChanged,
    simulated_samples
)


def fast_session():
    clock = ManualClock()
    ticker = ManualTicker(clock, interval_sec=0.1)
    return PostureSession(clock=clock, ticker=ticker), ticker


class TestRunFast:
    """Tests for virtual-time replay."""

    def test_scripted_session_totals(self, tmp_path):
        script = [
            MotionSegment(5.0),
            MotionSegment(20.0),
            MotionSegment(10.0, pitch_offset=-15.0),
        ]
        session, ticker = fast_session()
        logger = EventLogger(str(tmp_path / "events.jsonl"))

        final = run_fast(session, ticker, simulated_samples(script, noise_deg=0.0, start_time=100.0), logger)

        # 3s calibrating, then roughly 22s good and 10s bad
        assert final.baseline is not None
        assert final.stats.good_posture_time == pytest.approx(22.0, abs=0.5)
        assert final.stats.bad_posture_time == pytest.approx(10.0, abs=0.5)
        assert not session.snapshot().is_tracking

        types = [e["event_type"] for e in logger.get_recent_events(1000)]
        assert types[0] == "connection_changed"
        assert "status_changed" in types
        assert types[-1] == "tracking_changed"

    def test_empty_feed(self):
        session, ticker = fast_session()
        final = run_fast(session, ticker, [])
        assert final.stats.total_posture_time == 0.0


class TestFormatting:
    """Tests for console output helpers."""

    def test_status_line_disconnected(self):
        session, _ = fast_session()
        assert "DISCONNECTED" in format_status_line(session.snapshot())

    def test_status_line_calibrating(self):
        session, _ = fast_session()
        session.on_connect()
        session.start_tracking()
        assert format_status_line(session.snapshot()) == "[CALIBRATING] 0%"

    def test_describe_status_change(self):
        event = StatusChanged(from_direction="Neutral", to_direction="Left",
                              deviation_angle=1.0, yaw_deviation=20.0)
        assert "Left" in describe_event(event)
