"""
Interval model tests: half-open overlap rule and billable duration.
"""
import pytest
from datetime import datetime, timedelta, timezone
from app.utils.interval import Interval, ceil_hours, to_naive_utc
from conftest import at


def window(start_hour, end_hour):
    return Interval(at(start_hour), at(end_hour))


# =============================================================================
# TEST: Overlap
# =============================================================================
class TestOverlap:
    """Test the half-open overlap predicate."""
    
    @pytest.mark.parametrize("a, b", [
        ((9, 17), (16, 18)),
        ((9, 17), (8, 10)),
        ((9, 17), (10, 12)),
        ((9, 17), (8, 18)),
        ((9, 17), (17, 18)),
        ((9, 17), (6, 9)),
        ((9, 17), (18, 20)),
    ])
    def test_overlap_is_symmetric(self, a, b):
        first, second = window(*a), window(*b)
        assert first.overlaps(second) == second.overlaps(first)
    
    def test_interval_overlaps_itself(self):
        assert window(9, 17).overlaps(window(9, 17))
    
    def test_touching_boundaries_do_not_overlap(self):
        assert not window(9, 17).overlaps(window(17, 18))
        assert not window(17, 18).overlaps(window(9, 17))
    
    def test_partial_overlap(self):
        assert window(9, 17).overlaps(window(16, 18))
    
    def test_containment_overlaps(self):
        assert window(9, 17).overlaps(window(10, 11))
        assert window(10, 11).overlaps(window(9, 17))
    
    def test_disjoint_windows(self):
        assert not window(9, 10).overlaps(window(11, 12))
    
    def test_degenerate_interval(self):
        assert window(9, 9).is_degenerate
        assert window(10, 9).is_degenerate
        assert not window(9, 10).is_degenerate


# =============================================================================
# TEST: Duration
# =============================================================================
class TestDuration:
    """Test billable hour computation."""
    
    def test_whole_hours(self):
        assert window(9, 17).duration_hours() == 8
    
    def test_partial_hour_rounds_up(self):
        assert Interval(at(9), at(10, 30)).duration_hours() == 2
    
    def test_one_second_over_rounds_up(self):
        assert ceil_hours(timedelta(hours=3, seconds=1)) == 4
    
    def test_multi_day(self):
        assert Interval(at(0), at(0, day_offset=2)).duration_hours() == 48


# =============================================================================
# TEST: Timezone normalisation
# =============================================================================
class TestToNaiveUtc:
    
    def test_naive_passthrough(self):
        value = datetime(2099, 6, 1, 9, 0)
        assert to_naive_utc(value) == value
    
    def test_aware_converted_to_utc(self):
        jakarta = timezone(timedelta(hours=7))
        value = datetime(2099, 6, 1, 16, 0, tzinfo=jakarta)
        assert to_naive_utc(value) == datetime(2099, 6, 1, 9, 0)
