from .base import BaseScraper, MalformedTableError, ScraperError
from .wiki import WikiCalendarScraper, build_calendar, parse_month_table

__all__ = [
    "BaseScraper",
    "MalformedTableError",
    "ScraperError",
    "WikiCalendarScraper",
    "build_calendar",
    "parse_month_table",
]
