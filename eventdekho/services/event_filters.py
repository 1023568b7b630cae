"""
Listing filters for the public event feed.

Dates are compared as ``YYYY-MM-DD`` strings in UTC, the same representation
events store their ``date`` in, so a bucket is just an inclusive
``(from, to)`` pair of strings.
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

ALL_CATEGORIES = "all"
NOT_APPLICABLE = "NA"
PRICE_FREE = "Free"
PRICE_PAID = "Paid"

DATE_TODAY = "Today"
DATE_THIS_WEEKEND = "This Weekend"
DATE_NEXT_30_DAYS = "Next 30 Days"


@dataclass
class EventFilters:
    query: str = ""
    category: str = ALL_CATEGORIES
    mode: Optional[str] = None
    entry_type: Optional[str] = None
    subject_expertise: Optional[str] = None
    experience_required: Optional[str] = None
    job_type: Optional[str] = None
    city: Optional[str] = None
    eligibility: Optional[str] = None
    price: Optional[str] = None
    date_range: Optional[str] = None

    def narrowing(self, value: Optional[str]) -> Optional[str]:
        """Blank and ``NA`` values mean "don't filter"."""
        if not value or value == NOT_APPLICABLE:
            return None
        return value


def days_until_sunday(day: date) -> int:
    # Sunday counts as day 0 of the week, so on a Sunday the window is today alone
    js_weekday = (day.weekday() + 1) % 7
    return (7 - js_weekday) % 7


def date_range_bounds(bucket: Optional[str], today: Optional[date] = None) -> Optional[Tuple[str, str]]:
    """
    Inclusive ``(from, to)`` date strings for a relative date bucket.

    Unknown or empty buckets return None (no date filter).
    """
    if today is None:
        today = datetime.utcnow().date()

    if bucket == DATE_TODAY:
        end = today
    elif bucket == DATE_THIS_WEEKEND:
        end = today + timedelta(days=days_until_sunday(today))
    elif bucket == DATE_NEXT_30_DAYS:
        end = today + timedelta(days=30)
    else:
        return None
    return today.isoformat(), end.isoformat()
