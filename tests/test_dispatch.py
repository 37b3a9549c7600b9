"""Tests for metal_notifier/notifications/dispatch.py."""

import unittest
from unittest.mock import Mock

from metal_notifier.models import Release, Subscriber
from metal_notifier.notifications import DispatchLoop, RateBudget, RateLimitError

RELEASES = [Release("Saxon", "Carpe Diem")]


class FakeClock:
    """Clock that only moves when the loop sleeps."""

    def __init__(self, now=1_700_000_000.0):
        self.now = now
        self.sleeps = []

    def time(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def subscribers(*names):
    return [Subscriber(email=f"{name}@example.com", confirmed=True) for name in names]


class TestRateBudget(unittest.TestCase):
    def test_wait_adds_margin(self):
        self.assertEqual(RateBudget(0, 105).wait_seconds(100.0), 6)

    def test_wait_rounds_up_partial_seconds(self):
        self.assertEqual(RateBudget(0, 105).wait_seconds(100.5), 6)

    def test_wait_clamps_past_resets(self):
        self.assertEqual(RateBudget(0, 90).wait_seconds(100.0), 1)
        self.assertEqual(RateBudget(0, 90).wait_seconds(100.0, margin=0), 0)


class TestDispatchLoop(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.events = []

    def _budgets(self, *budgets):
        budgets = list(budgets)

        def fetch():
            self.events.append(("budget", self.clock.now))
            return budgets.pop(0)

        return fetch

    def _sender(self, to, releases):
        self.events.append(("send", to, self.clock.now))

    def _loop(self, budget_source, sender=None):
        return DispatchLoop(
            budget_source,
            sender or self._sender,
            clock=self.clock.time,
            sleep=self.clock.sleep,
        )

    def test_pauses_until_reset_when_budget_runs_out(self):
        start = self.clock.now
        reset = int(start) + 5
        loop = self._loop(self._budgets(RateBudget(2, reset), RateBudget(2, reset + 60)))

        result = loop.run(RELEASES, subscribers("a", "b", "c", "d"))

        sends = [e for e in self.events if e[0] == "send"]
        self.assertEqual([e[1] for e in sends], [
            "a@example.com", "b@example.com", "c@example.com", "d@example.com",
        ])
        self.assertEqual(sends[0][2], start)
        self.assertEqual(sends[1][2], start)
        self.assertGreaterEqual(sends[2][2] - start, 6)
        self.assertEqual(self.clock.sleeps, [6])
        self.assertEqual([e[0] for e in self.events], [
            "budget", "send", "send", "budget", "send", "send",
        ])
        self.assertEqual(result.sent, 4)
        self.assertEqual(result.budget_refreshes, 1)

    def test_no_pause_within_budget(self):
        loop = self._loop(self._budgets(RateBudget(10, int(self.clock.now) + 60)))

        result = loop.run(RELEASES, subscribers("a", "b", "c"))

        self.assertEqual(result.sent, 3)
        self.assertEqual(self.clock.sleeps, [])

    def test_exhausted_budget_waits_before_first_send(self):
        now = int(self.clock.now)
        loop = self._loop(self._budgets(RateBudget(0, now + 2), RateBudget(5, now + 60)))

        loop.run(RELEASES, subscribers("a"))

        self.assertEqual(self.clock.sleeps, [3])
        self.assertEqual([e[0] for e in self.events], ["budget", "budget", "send"])

    def test_empty_releases_sends_nothing(self):
        budget_source = Mock()
        sender = Mock()

        result = DispatchLoop(budget_source, sender).run([], subscribers("a"))

        self.assertEqual(result.sent, 0)
        budget_source.assert_not_called()
        sender.assert_not_called()

    def test_send_failure_does_not_stop_the_loop(self):
        def sender(to, releases):
            if to.startswith("b@"):
                raise RuntimeError("cannot schedule new futures after shutdown")
            self._sender(to, releases)

        loop = self._loop(self._budgets(RateBudget(10, int(self.clock.now) + 60)), sender)

        result = loop.run(RELEASES, subscribers("a", "b", "c"))

        self.assertEqual(result.sent, 2)
        self.assertEqual(result.failed, 1)
        self.assertEqual(
            [e[1] for e in self.events if e[0] == "send"],
            ["a@example.com", "c@example.com"],
        )

    def test_failed_initial_budget_fetch_aborts(self):
        sender = Mock()
        loop = self._loop(Mock(side_effect=RateLimitError("no headers")), sender)

        with self.assertRaises(RateLimitError):
            loop.run(RELEASES, subscribers("a", "b"))
        sender.assert_not_called()

    def test_failed_refresh_aborts_remaining_sends(self):
        now = int(self.clock.now)
        calls = []

        def fetch():
            calls.append(1)
            if len(calls) > 1:
                raise RateLimitError("provider down")
            return RateBudget(1, now + 1)

        loop = self._loop(fetch)

        with self.assertRaises(RateLimitError):
            loop.run(RELEASES, subscribers("a", "b", "c"))
        self.assertEqual([e[1] for e in self.events], ["a@example.com"])


if __name__ == "__main__":
    unittest.main()
