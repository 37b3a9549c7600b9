"""Tests for metal_notifier/models/calendar.py."""

import threading
import unittest
from unittest.mock import Mock

from metal_notifier.models import Calendar, CalendarHolder, Link, Month, Platform, Release


def sample_calendar():
    return Calendar({
        Month.MARCH: {25: [Release("Ensiferum", "Into Battle")]},
        Month.OCTOBER: {
            7: [Release("Behemoth", "Opvs Contra Natvram"), Release("Tomb Mold", "Aperture")],
            8: [],
        },
    })


class TestMonth(unittest.TestCase):
    def test_months_are_numbered_like_dates(self):
        self.assertEqual(len(Month), 12)
        self.assertEqual(Month(1), Month.JANUARY)
        self.assertEqual(Month.DECEMBER, 12)

    def test_title_matches_page_headings(self):
        self.assertEqual(Month.SEPTEMBER.title, "September")


class TestCalendar(unittest.TestCase):
    def test_default_calendar_is_empty(self):
        calendar = Calendar()

        self.assertEqual(len(calendar), 0)
        for month in Month:
            self.assertEqual(calendar.month(month), {})

    def test_month_accepts_plain_numbers(self):
        calendar = sample_calendar()

        self.assertEqual(calendar.month(3), calendar.month(Month.MARCH))

    def test_releases_on_date(self):
        releases = sample_calendar().releases_on_date(3, 25)

        self.assertEqual(releases, [Release("Ensiferum", "Into Battle")])

    def test_releases_on_date_keeps_table_order(self):
        releases = sample_calendar().releases_on_date(Month.OCTOBER, 7)

        self.assertEqual([r.artist for r in releases], ["Behemoth", "Tomb Mold"])

    def test_absent_day_gives_empty_list_for_every_month(self):
        calendar = sample_calendar()
        for month in Month:
            with self.subTest(month=month.title):
                self.assertEqual(calendar.releases_on_date(month, 26), [])

    def test_day_with_empty_list_gives_empty_list(self):
        enricher = Mock()

        self.assertEqual(sample_calendar().releases_on_date(10, 8, enricher), [])
        enricher.enrich_all.assert_not_called()

    def test_lookup_enriches_copies(self):
        calendar = sample_calendar()
        link = Link(Platform.YOUTUBE, "https://www.youtube.com/results?search_query=x")
        enricher = Mock()
        enricher.enrich_all.side_effect = lambda releases: [
            Release(r.artist, r.album, links=[link]) for r in releases
        ]

        releases = calendar.releases_on_date(3, 25, enricher)

        self.assertEqual(releases[0].links, [link])
        self.assertEqual(calendar.month(3)[25][0].links, [])

    def test_lookup_without_enricher_returns_copies(self):
        calendar = sample_calendar()

        releases = calendar.releases_on_date(3, 25)
        releases[0].links.append(Link(Platform.BANDCAMP, "https://ensiferum.bandcamp.com"))

        self.assertEqual(calendar.month(3)[25][0].links, [])

    def test_calendar_copies_input_months(self):
        months = {Month.MAY: {1: [Release("Artist", "Album")]}}
        calendar = Calendar(months)

        months[Month.MAY][2] = [Release("Late", "Entry")]

        self.assertEqual(list(calendar.month(5)), [1])

    def test_month_cannot_modify_calendar(self):
        calendar = sample_calendar()

        march = calendar.month(3)
        march[26] = [Release("Late", "Entry")]
        march[25].append(Release("Extra", "Album"))

        self.assertEqual(list(calendar.month(3)), [25])
        self.assertEqual(calendar.releases_on_date(3, 25), [Release("Ensiferum", "Into Battle")])

    def test_calendar_copies_input_day_lists(self):
        day = [Release("Artist", "Album")]
        calendar = Calendar({Month.MAY: {1: day}})

        day.append(Release("Late", "Entry"))

        self.assertEqual(len(calendar.month(5)[1]), 1)

    def test_summary_counts_releases_per_month(self):
        summary = dict(sample_calendar().summary())

        self.assertEqual(summary["March"], 1)
        self.assertEqual(summary["October"], 2)
        self.assertEqual(summary["January"], 0)
        self.assertEqual(len(sample_calendar()), 3)


class TestCalendarHolder(unittest.TestCase):
    def test_starts_with_empty_calendar(self):
        self.assertEqual(len(CalendarHolder().get()), 0)

    def test_publish_replaces_calendar(self):
        holder = CalendarHolder()
        calendar = sample_calendar()

        holder.publish(calendar)

        self.assertIs(holder.get(), calendar)

    def test_readers_see_whole_calendars(self):
        holder = CalendarHolder(Calendar())
        calendars = [sample_calendar() for _ in range(50)]
        seen = []

        def read():
            for _ in range(200):
                seen.append(len(holder.get()))

        reader = threading.Thread(target=read)
        reader.start()
        for calendar in calendars:
            holder.publish(calendar)
        reader.join()

        self.assertTrue(set(seen) <= {0, 3})


if __name__ == "__main__":
    unittest.main()
