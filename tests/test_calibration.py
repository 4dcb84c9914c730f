# Calibration Routine Tests

import pytest

from neckcoach import CalibrationRoutine, EstimatorConfig
from neckcoach.calibration import trimmed_mean


class TestTrimmedMean:
    """Tests for the trimmed mean helper."""

    def test_constant_input(self):
        assert trimmed_mean([4.0] * 30, 6, 24) == pytest.approx(4.0)

    def test_ignores_sorted_extremes(self):
        values = [1000.0] * 3 + [0.0] * 24 + [-1000.0] * 3
        assert trimmed_mean(values, 6, 24) == pytest.approx(0.0)

    def test_averages_middle_slice(self):
        values = list(range(10))
        # Sorted indices 2..7 -> 2,3,4,5,6,7
        assert trimmed_mean(values, 2, 8) == pytest.approx(4.5)


class TestCalibrationRoutine:
    """Tests for sample collection and baseline computation."""

    def test_default_trim_indices(self):
        config = EstimatorConfig()
        assert config.trim_start_index == 6
        assert config.trim_end_index == 24

    def test_no_baseline_before_enough_samples(self):
        routine = CalibrationRoutine()
        for _ in range(29):
            assert routine.add_sample(10.0, -5.0) is None
        assert routine.sample_count == 29
        assert routine.progress_percent == 96

    def test_constant_samples_converge(self):
        """30 constant samples give exactly that baseline."""
        routine = CalibrationRoutine()
        baseline = None
        for _ in range(30):
            baseline = routine.add_sample(10.0, -5.0)

        assert baseline is not None
        assert baseline.pitch_baseline == pytest.approx(10.0)
        assert baseline.yaw_baseline == pytest.approx(-5.0)
        assert baseline.sample_count == 30

    def test_outliers_rejected(self):
        """Six extreme samples land outside the averaged slice."""
        routine = CalibrationRoutine()
        pitches = [1000.0] * 3 + [0.0] * 24 + [-1000.0] * 3
        yaws = [0.0] * 12 + [500.0] * 3 + [-500.0] * 3 + [0.0] * 12
        baseline = None
        for pitch, yaw in zip(pitches, yaws):
            baseline = routine.add_sample(pitch, yaw)

        assert baseline.pitch_baseline == pytest.approx(0.0)
        assert baseline.yaw_baseline == pytest.approx(0.0)

    def test_buffers_cleared_after_completion(self):
        routine = CalibrationRoutine()
        for _ in range(30):
            routine.add_sample(1.0, 1.0)
        assert routine.sample_count == 0
        assert routine.progress == 0.0

    def test_custom_sample_count(self):
        routine = CalibrationRoutine(EstimatorConfig(calibration_samples=10, trim_fraction=0.1))
        values = [100.0] + [2.0] * 8 + [-100.0]
        baseline = None
        for v in values:
            baseline = routine.add_sample(v, v)
        assert baseline.pitch_baseline == pytest.approx(2.0)
        assert baseline.sample_count == 10

    def test_baseline_to_dict(self):
        routine = CalibrationRoutine()
        baseline = None
        for _ in range(30):
            baseline = routine.add_sample(3.0, 4.0)
        data = baseline.to_dict()
        assert data["pitch_baseline"] == pytest.approx(3.0)
        assert data["yaw_baseline"] == pytest.approx(4.0)
        assert "calibrated_at" in data
