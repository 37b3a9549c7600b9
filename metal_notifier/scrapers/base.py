"""Base scraper class with common functionality."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests
from bs4 import BeautifulSoup

from ..config import REQUEST_TIMEOUT, USER_AGENT


class ScraperError(Exception):
    """Base exception for scraper errors."""

    pass


class MalformedTableError(ScraperError):
    """Raised when a release table row does not have the expected shape."""

    pass


class BaseScraper(ABC):
    """Abstract base class for all scrapers."""

    SOURCE_NAME: str = ""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def scrape(self, *args, **kwargs):
        """Scrape the source. Must be implemented by subclasses."""
        pass

    def _fetch_page(self, url: str) -> Optional[BeautifulSoup]:
        """Fetch and parse a page."""
        try:
            self.logger.debug(f"Fetching: {url}")
            response = self.session.get(url, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
            return BeautifulSoup(response.text, "lxml")
        except requests.RequestException as e:
            self.logger.error(f"Failed to fetch {url}: {e}")
            return None

    @staticmethod
    def _cell_text(cell) -> str:
        """Text of a table cell with surrounding whitespace removed."""
        if cell is None:
            return ""
        return cell.get_text().strip()
