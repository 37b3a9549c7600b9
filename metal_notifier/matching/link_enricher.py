"""Attach listening links to calendar releases."""

import concurrent.futures
import logging
from dataclasses import replace
from typing import List, Optional
from urllib.parse import quote_plus, urlparse

import requests

from ..config import (
    BANDCAMP_HOST_TEMPLATE,
    BANDCAMP_SIGNUP_PATH,
    BANDCAMP_URL_TEMPLATE,
    ENRICH_WORKERS,
    PROBE_TIMEOUT,
    USER_AGENT,
    YOUTUBE_SEARCH_URL,
)
from ..models import Link, Platform, Release

logger = logging.getLogger(__name__)


class LinkEnricher:
    """
    Build YouTube and Bandcamp links for releases.

    The YouTube link is a search and is always present. The Bandcamp link
    is only added when a live request shows that the artist's page exists.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        workers: int = ENRICH_WORKERS,
    ):
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})
        self.workers = workers

    def links_for(self, artist: str, album: str) -> List[Link]:
        """Links for one release, YouTube first."""
        links = [self._youtube_link(artist, album)]

        bandcamp = self._find_bandcamp(artist)
        if bandcamp:
            links.append(bandcamp)

        return links

    def enrich(self, release: Release) -> Release:
        """Copy of a release with freshly computed links."""
        return replace(release, links=self.links_for(release.artist, release.album))

    def enrich_all(self, releases: List[Release]) -> List[Release]:
        """Enrich several releases concurrently, keeping their order."""
        if not releases:
            return []
        if len(releases) == 1 or self.workers <= 1:
            return [self.enrich(release) for release in releases]

        with concurrent.futures.ThreadPoolExecutor(max_workers=self.workers) as executor:
            return list(executor.map(self.enrich, releases))

    def _youtube_link(self, artist: str, album: str) -> Link:
        query = quote_plus(f"{artist} {album} full album")
        return Link(platform=Platform.YOUTUBE, url=f"{YOUTUBE_SEARCH_URL}{query}")

    def _find_bandcamp(self, artist: str) -> Optional[Link]:
        """
        Check whether the artist has a Bandcamp page.

        Bandcamp redirects unknown subdomains to its signup page. Landing
        on /signup of the artist's own host means there is no such artist;
        a signup page on any other host still counts as found.
        """
        slug = artist.lower().replace(" ", "")
        url = BANDCAMP_URL_TEMPLATE.format(artist=slug)
        expected_host = BANDCAMP_HOST_TEMPLATE.format(artist=slug)

        try:
            response = self.session.get(url, timeout=PROBE_TIMEOUT, allow_redirects=True)
        except requests.RequestException as e:
            logger.debug(f"Bandcamp lookup failed for '{artist}': {e}")
            return None

        final = urlparse(response.url)
        response.close()

        if final.path != BANDCAMP_SIGNUP_PATH or final.hostname != expected_host:
            return Link(platform=Platform.BANDCAMP, url=url)

        logger.debug(f"No Bandcamp page for '{artist}'")
        return None
