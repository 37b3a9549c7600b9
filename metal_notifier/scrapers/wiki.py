"""Scraper for the yearly Wikipedia heavy metal releases page."""

import concurrent.futures
import logging
import re
from datetime import date
from typing import List, Optional

from bs4 import BeautifulSoup

from ..config import MONTH_PARSE_WORKERS, WIKI_URL_TEMPLATE
from ..models import Calendar, Month, MonthReleases, Release
from .base import BaseScraper, MalformedTableError, ScraperError

logger = logging.getLogger(__name__)

DAY_PATTERN = re.compile(r"[0-9]{1,2}")
HEADING_TAGS = ["h2", "h3", "h4"]


def trim_album_name(album: str) -> str:
    """Drop footnote markers such as '[42]' and surrounding whitespace."""
    index = album.find("[")
    if index >= 0:
        album = album[:index]
    return album.strip()


def parse_day(text: str) -> int:
    """Parse a day-of-month cell, raising MalformedTableError if invalid."""
    text = text.strip()
    if not DAY_PATTERN.fullmatch(text) or not 1 <= int(text) <= 31:
        raise MalformedTableError(f"invalid day of month: {text!r}")
    return int(text)


class _RowState:
    """
    Carries what a row needs from the rows above it.

    Release tables merge cells across rows: a 3-cell row opens a day, a
    2-cell row adds another artist on that day, and a 1-cell row is
    another album by the artist of the row right above it.
    """

    def __init__(self):
        self.current_day: Optional[int] = None
        self.previous_artist = ""

    def feed(self, cells: List[str]) -> Optional[Release]:
        """Consume one row's cell texts, returning the release it adds."""
        shape = len(cells)
        release = None

        if shape == 3:
            self.current_day = parse_day(cells[0])
            release = Release(artist=cells[1].strip(), album=trim_album_name(cells[2]))
        elif shape == 2:
            self._require_day(cells)
            release = Release(artist=cells[0].strip(), album=trim_album_name(cells[1]))
        elif shape == 1:
            self._require_day(cells)
            release = Release(artist=self.previous_artist, album=trim_album_name(cells[0]))

        self.previous_artist = release.artist if release else ""
        return release

    def _require_day(self, cells: List[str]):
        if self.current_day is None:
            raise MalformedTableError(f"row {cells!r} appears before any day")


def find_month_rows(soup: BeautifulSoup, month: Month) -> list:
    """
    Locate the data rows of a month's release table.

    The table right after the month's heading is tried first, then the
    table whose id is 'table_<Month>'. The header row is dropped.
    """
    candidates = [_table_after_heading(soup, month)]
    candidates += [soup.find(id=table_id) for table_id in _table_ids(month)]
    for table in candidates:
        if table is None:
            continue
        rows = table.find_all("tr")
        if rows:
            return rows[1:]
    return []


def _table_ids(month: Month) -> List[str]:
    ids = [f"table_{month.title}"]
    # Some yearly pages misspell the February table id
    if month is Month.FEBRUARY:
        ids.append("table_Febuary")
    return ids


def _is_heading(tag) -> bool:
    return tag.name in HEADING_TAGS or "mw-heading" in (tag.get("class") or [])


def _table_after_heading(soup: BeautifulSoup, month: Month):
    anchor = soup.find("span", id=month.title) or soup.find(HEADING_TAGS, id=month.title)
    if anchor is None:
        return None

    heading = anchor.parent if anchor.name == "span" else anchor
    # Newer page markup wraps headings in <div class="mw-heading">
    if heading.parent is not None and "mw-heading" in (heading.parent.get("class") or []):
        heading = heading.parent

    for sibling in heading.find_next_siblings():
        if sibling.name == "table":
            return sibling
        if _is_heading(sibling):
            break
    return None


def parse_month_table(soup: BeautifulSoup, month: Month) -> MonthReleases:
    """
    Parse one month's release table into releases keyed by day.

    A month without a table gives an empty dict.

    Raises:
        MalformedTableError: if a row cannot be attributed to a valid day
    """
    releases: MonthReleases = {}
    state = _RowState()

    for row in find_month_rows(soup, month):
        cells = [BaseScraper._cell_text(td) for td in row.find_all("td")]
        release = state.feed(cells)
        if release is not None:
            releases.setdefault(state.current_day, []).append(release)

    logger.debug(f"{month.title}: {len(releases)} release days")
    return releases


def build_calendar(soup: BeautifulSoup, workers: int = MONTH_PARSE_WORKERS) -> Calendar:
    """
    Parse all twelve months concurrently into one calendar.

    Each month is parsed by its own task into its own slot. A malformed
    table in any month aborts the whole build.
    """
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_month = {
            executor.submit(parse_month_table, soup, month): month for month in Month
        }
        months = {}
        for future in concurrent.futures.as_completed(future_to_month):
            month = future_to_month[future]
            months[month] = future.result()

    return Calendar(months)


class WikiCalendarScraper(BaseScraper):
    """Scraper for Wikipedia's '<year> in heavy metal music' page."""

    SOURCE_NAME = "Wikipedia"

    def scrape(self, year: Optional[int] = None) -> Calendar:
        """
        Fetch the page for a year and build its release calendar.

        Raises:
            ScraperError: if the page cannot be fetched
            MalformedTableError: if a release table is malformed
        """
        year = year or date.today().year
        url = WIKI_URL_TEMPLATE.format(year=year)

        soup = self._fetch_page(url)
        if soup is None:
            raise ScraperError(f"could not fetch {url}")

        calendar = build_calendar(soup)
        if not len(calendar):
            self.logger.warning(
                f"{self.SOURCE_NAME}: No releases found - page structure may have changed"
            )
        return calendar
