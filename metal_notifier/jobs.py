"""Entry points invoked by an external scheduler."""

import logging
from datetime import date
from typing import Optional

from .matching import LinkEnricher
from .models import CalendarHolder
from .notifications import DispatchLoop, DispatchResult, EmailService, RateLimitError
from .scrapers import ScraperError, WikiCalendarScraper
from .state import SubscriberStore, SubscriberStoreError

logger = logging.getLogger(__name__)


def refresh_calendar(
    holder: CalendarHolder,
    scraper: Optional[WikiCalendarScraper] = None,
    email_service: Optional[EmailService] = None,
    year: Optional[int] = None,
) -> bool:
    """
    Scrape the releases page and publish the new calendar.

    The published calendar is only replaced when the whole build
    succeeds. Run weekly.

    Returns:
        True if a new calendar was published
    """
    scraper = scraper or WikiCalendarScraper()
    try:
        calendar = scraper.scrape(year)
    except ScraperError as e:
        _report(email_service, f"refresh_calendar: error scraping calendar: {e}")
        return False

    holder.publish(calendar)
    logger.info("Updated calendar")
    return True


def dispatch_todays_releases(
    holder: CalendarHolder,
    store: SubscriberStore,
    email_service: EmailService,
    enricher: Optional[LinkEnricher] = None,
    today: Optional[date] = None,
    loop: Optional[DispatchLoop] = None,
) -> Optional[DispatchResult]:
    """
    Email today's releases to every confirmed subscriber. Run daily.

    Returns:
        The dispatch result, or None when nothing was sent because there
        were no releases or the run was aborted
    """
    today = today or date.today()
    enricher = enricher or LinkEnricher()

    releases = holder.get().releases_on_date(today.month, today.day, enricher)
    if not releases:
        logger.info(f"No releases on {today.isoformat()}")
        return None

    try:
        subscribers = store.users()
    except SubscriberStoreError as e:
        _report(email_service, f"dispatch_todays_releases: error getting users: {e}")
        return None

    loop = loop or DispatchLoop(email_service.rate_limits, email_service.send_releases)
    try:
        return loop.run(releases, subscribers)
    except RateLimitError as e:
        _report(email_service, f"dispatch_todays_releases: error getting rate limits: {e}")
        return None


def clean_subscribers(
    store: SubscriberStore, email_service: Optional[EmailService] = None
) -> Optional[int]:
    """Delete subscribers who never confirmed. Run monthly."""
    try:
        return store.clean()
    except SubscriberStoreError as e:
        _report(email_service, f"clean_subscribers: cleaning users: {e}")
        return None


def _report(email_service: Optional[EmailService], text: str):
    logger.error(text)
    if email_service is not None:
        email_service.send_admin_error(text)
