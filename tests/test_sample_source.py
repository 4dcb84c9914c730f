# Sample Source Tests

import math

import pytest

from neckcoach import MotionSegment, OrientationSample, simulated_samples, load_replay, save_replay


class TestSimulatedSamples:
    """Tests for scripted head motion."""

    def test_timestamps_and_count(self):
        script = [MotionSegment(2.0), MotionSegment(1.0, pitch_offset=-10.0)]
        samples = list(simulated_samples(script, rate_hz=10.0, noise_deg=0.0, start_time=5.0))

        assert len(samples) == 30
        assert samples[0].timestamp == pytest.approx(5.0)
        assert samples[-1].timestamp == pytest.approx(7.9)

    def test_offsets_applied(self):
        script = [MotionSegment(1.0, pitch_offset=-10.0, yaw_offset=20.0)]
        samples = list(simulated_samples(script, neutral_pitch=-8.0, neutral_yaw=2.0, noise_deg=0.0))

        assert all(s.pitch == pytest.approx(-18.0) for s in samples)
        assert all(s.yaw == pytest.approx(22.0) for s in samples)

    def test_seed_is_reproducible(self):
        a = list(simulated_samples(seed=7))
        b = list(simulated_samples(seed=7))
        assert a == b

    def test_repeat_continues(self):
        gen = simulated_samples([MotionSegment(0.5)], rate_hz=10.0, repeat=True)
        samples = [next(gen) for _ in range(12)]
        assert samples[-1].timestamp == pytest.approx(1.1)

    def test_invalid_rate(self):
        with pytest.raises(ValueError):
            list(simulated_samples(rate_hz=0))


class TestReplay:
    """Tests for recorded sample files."""

    def test_csv_round_trip(self, tmp_path):
        path = tmp_path / "replay.csv"
        samples = [OrientationSample(pitch=-8.0, yaw=1.5, timestamp=float(i) / 2) for i in range(5)]
        save_replay(samples, str(path))

        assert load_replay(str(path)) == samples

    def test_sorted_by_timestamp(self, tmp_path):
        path = tmp_path / "replay.csv"
        path.write_text("timestamp,pitch,yaw\n2.0,1,1\n1.0,2,2\n")

        loaded = load_replay(str(path))
        assert [s.timestamp for s in loaded] == [1.0, 2.0]

    def test_jsonl(self, tmp_path):
        path = tmp_path / "replay.jsonl"
        path.write_text('{"timestamp": 0.0, "pitch": -3.0, "yaw": 4.0, "extra": 1}\n')

        loaded = load_replay(str(path))
        assert loaded == [OrientationSample(pitch=-3.0, yaw=4.0, timestamp=0.0)]

    def test_non_finite_kept(self, tmp_path):
        path = tmp_path / "replay.csv"
        path.write_text("timestamp,pitch,yaw\n0.0,nan,1\n")

        loaded = load_replay(str(path))
        assert math.isnan(loaded[0].pitch)
        assert not loaded[0].is_finite()

    def test_missing_column(self, tmp_path):
        path = tmp_path / "replay.csv"
        path.write_text("timestamp,pitch\n0.0,1\n")

        with pytest.raises(ValueError):
            load_replay(str(path))
