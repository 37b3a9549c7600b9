from .calendar import Calendar, CalendarHolder, Month, MonthReleases
from .release import Link, Platform, Release
from .subscriber import Subscriber

__all__ = [
    "Calendar",
    "CalendarHolder",
    "Link",
    "Month",
    "MonthReleases",
    "Platform",
    "Release",
    "Subscriber",
]
