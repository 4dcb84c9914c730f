# Status Bus Tests

import json
import os
import time

import pytest

from neckcoach import StatusBus, create_status_from_session, read_status


class TestStatusBus:
    """Tests for status file publishing."""

    def test_publish_requires_provider(self, tmp_path):
        bus = StatusBus(str(tmp_path / "status.json"))
        with pytest.raises(ValueError):
            bus.publish_now()
        with pytest.raises(ValueError):
            bus.start()

    def test_publish_now_writes_atomically(self, tmp_path):
        status_file = tmp_path / "status.json"
        bus = StatusBus(str(status_file))
        bus.set_snapshot_provider(lambda: {"value": 1})

        assert bus.publish_now() is True
        assert json.loads(status_file.read_text()) == {"value": 1}
        assert not (tmp_path / "status.tmp").exists()

    def test_empty_snapshot_not_written(self, tmp_path):
        status_file = tmp_path / "status.json"
        bus = StatusBus(str(status_file))
        bus.set_snapshot_provider(lambda: None)

        assert bus.publish_now() is False
        assert not status_file.exists()

    def test_background_publishing(self, tmp_path):
        status_file = tmp_path / "status.json"
        bus = StatusBus(str(status_file), update_interval_sec=0.05)
        bus.set_snapshot_provider(lambda: {"ok": True})
        bus.start()
        deadline = time.time() + 2.0
        while not status_file.exists() and time.time() < deadline:
            time.sleep(0.01)
        bus.stop()

        assert status_file.exists()


class TestChangeDetection:
    """Tests for skipping writes of an unchanged session."""

    def test_unchanged_session_not_rewritten(self, tmp_path, session):
        bus = StatusBus(str(tmp_path / "status.json"), heartbeat_sec=60.0)
        bus.set_snapshot_provider(lambda: create_status_from_session(session))

        assert bus.publish_now(force=False) is True
        assert bus.publish_now(force=False) is False
        assert bus.write_count == 1

    def test_session_change_is_written(self, tmp_path, session, clock):
        bus = StatusBus(str(tmp_path / "status.json"), heartbeat_sec=60.0)
        bus.set_snapshot_provider(lambda: create_status_from_session(session))
        bus.publish_now(force=False)

        clock.advance(1.0)
        session.start_tracking()

        assert bus.publish_now(force=False) is True
        data, _ = read_status(str(tmp_path / "status.json"))
        assert data["is_tracking"] is True
        assert data["updated_at"] == pytest.approx(1001.0)

    def test_heartbeat_rewrites_unchanged_session(self, tmp_path, session):
        bus = StatusBus(str(tmp_path / "status.json"), heartbeat_sec=0.0)
        bus.set_snapshot_provider(lambda: create_status_from_session(session))

        assert bus.publish_now(force=False) is True
        assert bus.publish_now(force=False) is True
        assert bus.write_count == 2

    def test_forced_publish_always_writes(self, tmp_path, session):
        bus = StatusBus(str(tmp_path / "status.json"), heartbeat_sec=60.0)
        bus.set_snapshot_provider(lambda: create_status_from_session(session))

        bus.publish_now()
        assert bus.publish_now() is True
        assert bus.write_count == 2


class TestSessionStatus:
    """Tests for the session status payload."""

    def test_payload_fields(self, session):
        session.start_tracking()
        for _ in range(30):
            session.submit_sample(0.0, 0.0)
        session.submit_sample(-12.0, 0.0)

        data = create_status_from_session(session)

        assert data["is_tracking"] is True
        assert data["current_status"]["direction"] == "Forward"
        assert data["position_label"] == "Looking Down"
        assert data["baseline"]["sample_count"] == 30
        assert len(data["hourly"]) == 1
        assert "ts_unix" in data
        json.dumps(data)

    def test_round_trip_through_file(self, tmp_path, session):
        status_file = tmp_path / "status.json"
        bus = StatusBus(str(status_file))
        bus.set_snapshot_provider(lambda: create_status_from_session(session))
        bus.publish_now()

        data, error = read_status(str(status_file))
        assert error is None
        assert data["is_connected"] is True


class TestReadStatus:
    """Tests for reading the status file."""

    def test_missing_file(self, tmp_path):
        data, error = read_status(str(tmp_path / "missing.json"))
        assert data is None
        assert error == "File not found"

    def test_stale_file(self, tmp_path):
        status_file = tmp_path / "status.json"
        status_file.write_text("{}")
        old = time.time() - 60
        os.utime(status_file, (old, old))

        data, error = read_status(str(status_file), max_age_sec=3.0)
        assert data is None
        assert error.startswith("Stale")

    def test_staleness_check_disabled(self, tmp_path):
        status_file = tmp_path / "status.json"
        status_file.write_text('{"a": 1}')
        old = time.time() - 60
        os.utime(status_file, (old, old))

        data, error = read_status(str(status_file), max_age_sec=None)
        assert data == {"a": 1}

    def test_corrupt_file(self, tmp_path):
        status_file = tmp_path / "status.json"
        status_file.write_text("{not json")
        data, error = read_status(str(status_file))
        assert data is None
        assert error
