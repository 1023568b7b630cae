"""
Unit tests for the feed's date buckets and filter normalisation.
"""
import pytest
from datetime import date

from eventdekho.services.event_filters import (
    DATE_NEXT_30_DAYS,
    DATE_THIS_WEEKEND,
    DATE_TODAY,
    EventFilters,
    date_range_bounds,
    days_until_sunday,
)

WEDNESDAY = date(2025, 1, 1)
SATURDAY = date(2025, 1, 4)
SUNDAY = date(2025, 1, 5)


@pytest.mark.unit
class TestDateRangeBounds:

    def test_today(self):
        assert date_range_bounds(DATE_TODAY, WEDNESDAY) == ("2025-01-01", "2025-01-01")

    def test_weekend_from_midweek_runs_to_sunday(self):
        assert date_range_bounds(DATE_THIS_WEEKEND, WEDNESDAY) == ("2025-01-01", "2025-01-05")

    def test_weekend_from_saturday(self):
        assert date_range_bounds(DATE_THIS_WEEKEND, SATURDAY) == ("2025-01-04", "2025-01-05")

    def test_weekend_on_sunday_is_just_today(self):
        assert date_range_bounds(DATE_THIS_WEEKEND, SUNDAY) == ("2025-01-05", "2025-01-05")

    def test_next_30_days_crosses_month(self):
        assert date_range_bounds(DATE_NEXT_30_DAYS, WEDNESDAY) == ("2025-01-01", "2025-01-31")

    @pytest.mark.parametrize("bucket", [None, "", "Next Year"])
    def test_unknown_bucket_means_no_filter(self, bucket):
        assert date_range_bounds(bucket, WEDNESDAY) is None

    def test_days_until_sunday(self):
        assert days_until_sunday(date(2025, 1, 6)) == 6  # Monday
        assert days_until_sunday(SATURDAY) == 1
        assert days_until_sunday(SUNDAY) == 0


@pytest.mark.unit
class TestNarrowing:

    @pytest.mark.parametrize("value", [None, "", "NA"])
    def test_not_applicable_values_are_dropped(self, value):
        assert EventFilters().narrowing(value) is None

    def test_real_values_pass_through(self):
        assert EventFilters().narrowing("Mathematics") == "Mathematics"

    def test_defaults_filter_nothing(self):
        filters = EventFilters()
        assert filters.category == "all"
        assert filters.query == ""
