"""Email delivery through the SendGrid API."""

import concurrent.futures
import logging
from typing import List, Optional

from python_http_client.exceptions import HTTPError
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import From, Mail

from .. import config
from ..models import Release
from .dispatch import RateBudget
from .templates import (
    EmailTemplate,
    RenderedEmail,
    render_releases_email,
    render_simple_email,
)

logger = logging.getLogger(__name__)

REMAINING_HEADER = "X-RateLimit-Remaining"
RESET_HEADER = "X-RateLimit-Reset"


class NotificationError(Exception):
    """Base exception for email errors."""

    pass


class RateLimitError(NotificationError):
    """Raised when the provider's rate limits cannot be read."""

    pass


class EmailService:
    """
    Send notification emails and report the provider's rate budget.

    Sends are fire-and-forget: each one runs on a background worker and a
    failure is logged, never raised to the caller.
    """

    def __init__(
        self,
        api_key: str = None,
        email_from: str = None,
        app_url: str = None,
        client: Optional[SendGridAPIClient] = None,
        executor: Optional[concurrent.futures.Executor] = None,
    ):
        self.api_key = config.SENDGRID_API_KEY if api_key is None else api_key
        self.email_from = config.EMAIL_FROM if email_from is None else email_from
        self.app_url = config.APP_URL if app_url is None else app_url
        self.client = client or SendGridAPIClient(self.api_key)
        self._executor = executor or concurrent.futures.ThreadPoolExecutor(
            max_workers=config.SEND_WORKERS, thread_name_prefix="email"
        )

    def rate_limits(self) -> RateBudget:
        """
        Read the remaining calls and the reset time from the provider.

        Raises:
            RateLimitError: if the request fails or the headers are missing
        """
        try:
            response = self.client.client.templates.get()
        except (HTTPError, OSError) as e:
            raise RateLimitError(f"rate limit request failed: {e}") from e

        headers = response.headers
        remaining = headers.get(REMAINING_HEADER)
        if remaining is None:
            raise RateLimitError(f"cannot find the {REMAINING_HEADER} header")
        reset = headers.get(RESET_HEADER)
        if reset is None:
            raise RateLimitError(f"cannot find the {RESET_HEADER} header")

        try:
            return RateBudget(remaining=int(remaining), reset_at=int(reset))
        except ValueError as e:
            raise RateLimitError(f"invalid rate limit headers: {e}") from e

    def send_releases(self, to: str, releases: List[Release]):
        """Queue the daily releases email for one subscriber."""
        name = to.split("@")[0]
        return self.send(to, render_releases_email(name, to, releases, self.app_url))

    def send_intro(self, to: str):
        """Queue the welcome email with its confirmation link."""
        email = render_simple_email(
            EmailTemplate.INTRO, name=to.split("@")[0], email=to, app_url=self.app_url
        )
        return self.send(to, email)

    def send_end_of_service(self, to: str):
        """Queue the goodbye email sent after unsubscribing."""
        email = render_simple_email(EmailTemplate.END_OF_SERVICE, name=to.split("@")[0])
        return self.send(to, email)

    def send_admin_error(self, text: str):
        """Queue an error report to the administrator."""
        return self.send(self.email_from, render_simple_email(EmailTemplate.ERROR_ADMIN, text=text))

    def send(self, to: str, email: RenderedEmail) -> concurrent.futures.Future:
        """Queue an email without waiting for it to be delivered."""
        future = self._executor.submit(self._deliver, to, email)
        future.add_done_callback(_log_task_failure)
        return future

    def close(self, wait: bool = True):
        """Wait for queued emails and stop the workers."""
        self._executor.shutdown(wait=wait)

    def _deliver(self, to: str, email: RenderedEmail) -> bool:
        message = Mail(
            from_email=From(self.email_from, config.SENDER_NAME),
            to_emails=to,
            subject=email.subject,
            plain_text_content=email.text,
            html_content=email.html,
        )
        try:
            response = self.client.send(message)
        except (HTTPError, OSError) as e:
            logger.error(f"Error sending '{email.subject}' email to {to}: {e}")
            return False

        if response.status_code >= 300:
            logger.error(
                f"Error sending '{email.subject}' email to {to}: status {response.status_code}"
            )
            return False

        logger.debug(f"Sent '{email.subject}' email to {to}")
        return True


def _log_task_failure(future: concurrent.futures.Future):
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.error(f"Email task failed: {error!r}")
