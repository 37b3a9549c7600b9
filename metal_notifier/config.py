"""Configuration for the heavy metal releases notifier."""

import os
import re
from pathlib import Path

# Source page, one per calendar year
WIKI_URL_TEMPLATE = "https://en.wikipedia.org/wiki/{year}_in_heavy_metal_music"

# Link enrichment
YOUTUBE_SEARCH_URL = "https://www.youtube.com/results?search_query="
BANDCAMP_URL_TEMPLATE = "https://{artist}.bandcamp.com"
BANDCAMP_HOST_TEMPLATE = "{artist}.bandcamp.com"
BANDCAMP_SIGNUP_PATH = "/signup"

# Concurrency
MONTH_PARSE_WORKERS = 12
ENRICH_WORKERS = 8
SEND_WORKERS = 4

# Seconds added to the provider's reset timestamp before resuming sends
RATE_LIMIT_MARGIN_SECONDS = 1

REQUEST_TIMEOUT = 30
PROBE_TIMEOUT = 10

# User agent for requests
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

SENDER_NAME = "Heavy Metal Releases"

EMAIL_REGEX = re.compile(
    r"^[\w.!#$%&'*+/=?^_`{|}~-]+@\w(?:[\w-]{0,61}\w)?(?:\.\w(?:[\w-]{0,61}\w)?)*$"
)

# Runtime settings
SENDGRID_API_KEY = os.environ.get("SENDGRID_API_KEY", "")
EMAIL_FROM = os.environ.get("EMAIL_FROM", "")
APP_URL = os.environ.get("APP_URL", "").rstrip("/")
MAX_SUBSCRIBERS = int(os.environ.get("MAX_SUBSCRIBERS", "100"))
DATA_DIR = Path(os.environ.get("DATA_DIR", Path(__file__).parent.parent / "data"))


class ConfigError(Exception):
    """Raised when the runtime configuration is invalid."""

    pass


def is_valid_email(email: str) -> bool:
    """Check an address against the accepted email format."""
    return bool(EMAIL_REGEX.match(email or ""))


def validate_config(
    api_key: str = None,
    email_from: str = None,
    app_url: str = None,
    max_subscribers: int = None,
):
    """
    Verify the runtime settings needed to send emails.

    Arguments default to the values read from the environment.

    Raises:
        ConfigError: if a setting is missing or malformed
    """
    api_key = SENDGRID_API_KEY if api_key is None else api_key
    email_from = EMAIL_FROM if email_from is None else email_from
    app_url = APP_URL if app_url is None else app_url
    max_subscribers = MAX_SUBSCRIBERS if max_subscribers is None else max_subscribers

    if not is_valid_email(email_from):
        raise ConfigError("invalid EMAIL_FROM address")
    if max_subscribers <= 0:
        raise ConfigError("MAX_SUBSCRIBERS must be greater than zero")
    if not api_key:
        raise ConfigError("missing SENDGRID_API_KEY")
    if not app_url:
        raise ConfigError("missing APP_URL")
