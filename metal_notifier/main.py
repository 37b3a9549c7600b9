"""Command line entry points for the heavy metal releases notifier."""

import argparse
import logging
import sys
from datetime import date

from . import config
from .jobs import clean_subscribers, dispatch_todays_releases, refresh_calendar
from .matching import LinkEnricher
from .models import CalendarHolder
from .notifications import EmailService
from .state import SubscriberStore, SubscriberStoreError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
    ],
)
logger = logging.getLogger(__name__)


def _store() -> SubscriberStore:
    return SubscriberStore(config.DATA_DIR / "subscribers.json")


def _email_service() -> EmailService:
    try:
        config.validate_config()
    except config.ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(2)
    return EmailService()


def cmd_refresh(args) -> int:
    """Scrape the calendar and log a per-month summary."""
    holder = CalendarHolder()
    if not refresh_calendar(holder, year=args.year):
        return 1

    logger.info("-" * 40)
    for month, count in holder.get().summary():
        logger.info(f"  {month:<10} {count:4} releases")
    logger.info("-" * 40)
    logger.info(f"Total releases: {len(holder.get())}")
    return 0


def cmd_today(args) -> int:
    """Print the releases for a day with their links."""
    day = args.date or date.today()
    holder = CalendarHolder()
    if not refresh_calendar(holder, year=day.year):
        return 1

    releases = holder.get().releases_on_date(day.month, day.day, LinkEnricher())
    if not releases:
        print(f"No releases on {day.isoformat()}")
        return 0

    print(f"Releases on {day.isoformat()}:")
    for release in releases:
        print(f"  * {release.artist} - {release.album}")
        for link in release.links:
            print(f"      {link.platform.value}: {link.url}")
    return 0


def cmd_dispatch(args) -> int:
    """Refresh the calendar, then email today's releases."""
    logger.info("=" * 60)
    logger.info("Starting daily releases dispatch")
    logger.info("=" * 60)

    email_service = _email_service()
    holder = CalendarHolder()
    try:
        if not refresh_calendar(holder, email_service=email_service):
            return 1
        result = dispatch_todays_releases(holder, _store(), email_service)
    finally:
        email_service.close()

    if result is not None:
        logger.info(f"Sent: {result.sent}, failed: {result.failed}")
    return 0


def cmd_clean(args) -> int:
    """Delete unconfirmed subscribers."""
    removed = clean_subscribers(_store())
    return 1 if removed is None else 0


def cmd_subscribe(args) -> int:
    """Register an address and send the confirmation email."""
    email_service = _email_service()
    try:
        subscriber = _store().register(args.email)
        email_service.send_intro(subscriber.email)
    except SubscriberStoreError as e:
        logger.error(str(e))
        return 1
    finally:
        email_service.close()
    return 0


def cmd_confirm(args) -> int:
    """Confirm a registered address."""
    try:
        _store().confirm(args.email)
    except SubscriberStoreError as e:
        logger.error(str(e))
        return 1
    return 0


def cmd_unsubscribe(args) -> int:
    """Remove an address and send the goodbye email."""
    email_service = _email_service()
    try:
        _store().unregister(args.email)
        email_service.send_end_of_service(args.email)
    except SubscriberStoreError as e:
        logger.error(str(e))
        return 1
    finally:
        email_service.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metal-notifier",
        description="Track heavy metal releases and email subscribers.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    refresh = sub.add_parser("refresh", help="Scrape this year's release calendar")
    refresh.add_argument("--year", type=int, default=None)
    refresh.set_defaults(func=cmd_refresh)

    today = sub.add_parser("today", help="Show releases for a day")
    today.add_argument(
        "--date", type=date.fromisoformat, default=None, help="YYYY-MM-DD, defaults to today"
    )
    today.set_defaults(func=cmd_today)

    sub.add_parser("dispatch", help="Email today's releases").set_defaults(func=cmd_dispatch)
    sub.add_parser("clean", help="Delete unconfirmed subscribers").set_defaults(func=cmd_clean)

    for name, func, text in (
        ("subscribe", cmd_subscribe, "Register an email address"),
        ("confirm", cmd_confirm, "Confirm an email address"),
        ("unsubscribe", cmd_unsubscribe, "Remove an email address"),
    ):
        command = sub.add_parser(name, help=text)
        command.add_argument("email")
        command.set_defaults(func=func)

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
