# Smoothing Window Tests

import pytest

from neckcoach import SmoothingWindow


class TestSmoothingWindow:
    """Tests for the bounded FIFO mean."""

    def test_empty_mean_is_zero(self):
        window = SmoothingWindow()
        assert window.mean() == 0.0
        assert len(window) == 0

    def test_partial_window_mean(self):
        window = SmoothingWindow(5)
        window.add(2.0)
        assert window.add(4.0) == pytest.approx(3.0)

    def test_length_never_exceeds_capacity(self):
        window = SmoothingWindow(5)
        for i in range(12):
            window.add(float(i))
            assert window.size() <= 5
        assert window.get_values() == [7.0, 8.0, 9.0, 10.0, 11.0]

    def test_one_new_value_shifts_mean_by_fifth(self):
        """Only the last five values count."""
        window = SmoothingWindow(5)
        a, b = 4.0, 9.0
        for _ in range(5):
            window.add(a)
        before = window.mean()
        after = window.add(b)
        assert after - before == pytest.approx((b - a) / 5)

    def test_old_values_have_no_influence(self):
        window = SmoothingWindow(5)
        window.add(1000.0)
        for _ in range(5):
            window.add(1.0)
        assert window.mean() == pytest.approx(1.0)

    def test_clear(self):
        window = SmoothingWindow(3)
        window.add(1.0)
        window.clear()
        assert window.get_values() == []

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            SmoothingWindow(0)
