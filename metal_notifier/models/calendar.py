"""Data model for the yearly release calendar."""

import logging
import threading
from dataclasses import replace
from enum import IntEnum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .release import Release

logger = logging.getLogger(__name__)

# Day of month -> releases in table order
MonthReleases = Dict[int, List[Release]]


class Month(IntEnum):
    """Calendar months, numbered like datetime.date.month."""

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    @property
    def title(self) -> str:
        """Month name as written on the wiki page, e.g. 'January'."""
        return self.name.capitalize()


class Calendar:
    """
    Twelve month slots of releases keyed by day.

    A calendar is immutable once built. A new scrape produces a new
    calendar, published through CalendarHolder.
    """

    def __init__(self, months: Optional[Dict[Month, MonthReleases]] = None):
        months = months or {}
        self._slots: Tuple[MonthReleases, ...] = tuple(
            {day: list(xs) for day, xs in (months.get(month) or {}).items()}
            for month in Month
        )

    def month(self, month: int) -> MonthReleases:
        """Copy of the releases for a month, keyed by day."""
        slot = self._slots[Month(month) - 1]
        return {day: list(releases) for day, releases in slot.items()}

    def releases_on_date(self, month: int, day: int, enricher=None) -> List[Release]:
        """
        Get the releases for a day.

        Days without releases give an empty list. When an enricher is
        given, the returned releases are copies carrying fresh links; the
        calendar itself is never modified.

        Args:
            month: Month number (1-12)
            day: Day of the month
            enricher: Object with an enrich_all(releases) method

        Returns:
            List of releases in table order
        """
        releases = self.month(month).get(day) or []
        if not releases:
            return []

        if enricher is None:
            return [replace(release, links=[]) for release in releases]
        return enricher.enrich_all(releases)

    def __iter__(self) -> Iterable[Tuple[Month, MonthReleases]]:
        return iter((month, self.month(month)) for month in Month)

    def __len__(self) -> int:
        """Total number of releases in the calendar."""
        return sum(len(xs) for slot in self._slots for xs in slot.values())

    def __eq__(self, other):
        if not isinstance(other, Calendar):
            return False
        return self._slots == other._slots

    def summary(self) -> Sequence[Tuple[str, int]]:
        """(month name, release count) for every month."""
        return [
            (month.title, sum(len(xs) for xs in releases.values()))
            for month, releases in self
        ]


class CalendarHolder:
    """Thread-safe handle to the currently published calendar."""

    def __init__(self, calendar: Optional[Calendar] = None):
        self._calendar = calendar or Calendar()
        self._lock = threading.Lock()

    def get(self) -> Calendar:
        """Return the published calendar."""
        with self._lock:
            return self._calendar

    def publish(self, calendar: Calendar):
        """Replace the published calendar with a fully built one."""
        with self._lock:
            self._calendar = calendar
        logger.info(f"Published calendar with {len(calendar)} releases")
