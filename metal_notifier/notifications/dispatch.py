"""Rate-limited fan-out of release emails to subscribers."""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Iterable, List

from ..config import RATE_LIMIT_MARGIN_SECONDS
from ..models import Release

logger = logging.getLogger(__name__)


@dataclass
class RateBudget:
    """Calls left before the provider's window resets."""

    remaining: int
    reset_at: int  # Unix seconds

    def wait_seconds(self, now: float, margin: int = RATE_LIMIT_MARGIN_SECONDS) -> int:
        """Seconds to wait for the window to reset, plus a safety margin."""
        return max(0, math.ceil(self.reset_at - now)) + margin


@dataclass
class DispatchResult:
    """What a dispatch run did."""

    sent: int = 0
    failed: int = 0
    budget_refreshes: int = 0


class DispatchLoop:
    """
    Send one email per subscriber without exceeding the provider's rate.

    The budget is read once up front. When the sends since the last read
    reach the remaining count, the loop sleeps until the window resets,
    reads the budget again and resumes. A failed budget read propagates
    and ends the run; a failed send is logged and skipped.
    """

    def __init__(
        self,
        budget_source: Callable[[], RateBudget],
        sender: Callable[[str, List[Release]], object],
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        margin: int = RATE_LIMIT_MARGIN_SECONDS,
    ):
        self.budget_source = budget_source
        self.sender = sender
        self.clock = clock
        self.sleep = sleep
        self.margin = margin

    def run(self, releases: List[Release], subscribers: Iterable) -> DispatchResult:
        """
        Notify every subscriber about the given releases.

        Args:
            releases: Today's releases; nothing is sent when empty
            subscribers: Objects with an ``email`` attribute, in send order

        Returns:
            Counts of sent and failed emails
        """
        result = DispatchResult()
        if not releases:
            logger.info("No releases to dispatch")
            return result

        budget = self.budget_source()
        count = 0

        for subscriber in subscribers:
            while count >= budget.remaining:
                wait = budget.wait_seconds(self.clock(), self.margin)
                logger.info(
                    f"Rate limit reached after {count} emails, waiting {wait}s for reset"
                )
                if wait > 0:
                    self.sleep(wait)
                budget = self.budget_source()
                result.budget_refreshes += 1
                count = 0

            try:
                self.sender(subscriber.email, releases)
                result.sent += 1
            except Exception as e:
                logger.error(f"Failed to queue email for {subscriber.email}: {e}")
                result.failed += 1
            count += 1

        logger.info(
            f"Dispatched {len(releases)} releases to {result.sent} subscribers "
            f"({result.failed} failed)"
        )
        return result
