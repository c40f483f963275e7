"""Tests for volume window statistics and prior-window extremes."""

import pytest

from signal_desk.metrics.extremes import max_prev, min_prev
from signal_desk.metrics.volume import volume_window_stats


class TestVolumeWindowStats:
    """Test average and coverage over the prior window."""

    def test_full_coverage(self):
        """Test every positive volume counts."""
        window = volume_window_stats([10.0, 20.0, 30.0, 99.0], index=3, lookback=3)
        assert window.average == pytest.approx(20.0)
        assert window.coverage == pytest.approx(1.0)

    def test_current_bar_excluded(self):
        """Test the volume at ``index`` is not part of the window."""
        window = volume_window_stats([10.0, 10.0, 10.0, 1000.0], index=3, lookback=3)
        assert window.average == pytest.approx(10.0)

    def test_missing_and_zero_volumes_reduce_coverage(self):
        """Test None and non-positive volumes are skipped."""
        window = volume_window_stats([10.0, None, 0.0, 30.0, 5.0], index=4, lookback=4)
        assert window.average == pytest.approx(20.0)
        assert window.coverage == pytest.approx(0.5)

    def test_no_usable_volume(self):
        """Test an all-missing window has undefined average and zero coverage."""
        window = volume_window_stats([None, None, None, 10.0], index=3, lookback=3)
        assert window.average is None
        assert window.coverage == 0.0

    def test_incomplete_window(self):
        """Test a window reaching before the series start is empty."""
        window = volume_window_stats([10.0, 20.0], index=1, lookback=5)
        assert window.average is None
        assert window.coverage == 0.0


class TestPriorExtremes:
    """Test max/min over the window strictly before an index."""

    def test_max_prev_excludes_current(self):
        """Test the current value is excluded from the maximum."""
        assert max_prev([1.0, 5.0, 3.0, 10.0], index=3, lookback=3) == 5.0

    def test_min_prev(self):
        """Test the minimum of the prior window."""
        assert min_prev([4.0, 2.0, 3.0, 0.5], index=3, lookback=3) == 2.0

    def test_incomplete_window(self):
        """Test undefined when the window reaches before index 0."""
        assert max_prev([1.0, 2.0], index=1, lookback=2) is None
        assert min_prev([1.0, 2.0], index=1, lookback=2) is None
