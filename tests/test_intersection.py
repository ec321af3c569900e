"""Tests for the availability intersection engine and the TimeSlot value type"""

import unittest

from rendezvous.domain.scheduling.intersection import intersect
from rendezvous.domain.scheduling.timeslots import TimeSlot


def slot(day: str, start: str, end: str) -> TimeSlot:
    return TimeSlot.from_strings(day, start, end)


class TestTimeSlot(unittest.TestCase):
    def test_start_must_precede_end(self):
        with self.assertRaises(ValueError):
            slot("2024-01-01", "11:00", "11:00")
        with self.assertRaises(ValueError):
            slot("2024-01-01", "12:00", "11:00")

    def test_malformed_time_rejected(self):
        with self.assertRaises(ValueError):
            slot("2024-01-01", "9:00", "10:00")
        with self.assertRaises(ValueError):
            slot("2024-01-01", "10:00", "24:00")

    def test_overlap_minutes(self):
        a = slot("2024-01-01", "10:00", "11:00")
        self.assertEqual(a.overlap_minutes(slot("2024-01-01", "10:45", "12:00")), 15)
        self.assertEqual(a.overlap_minutes(slot("2024-01-02", "10:00", "11:00")), 0)

    def test_touching_windows_do_not_overlap(self):
        a = slot("2024-01-01", "10:00", "11:00")
        b = slot("2024-01-01", "11:00", "12:00")
        self.assertFalse(a.overlaps(b))
        self.assertIsNone(a.intersection(b))

    def test_dict_form(self):
        a = slot("2024-01-01", "09:05", "10:00")
        self.assertEqual(a.to_dict(), {"date": "2024-01-01", "start": "09:05", "end": "10:00"})
        self.assertEqual(TimeSlot.from_dict(a.to_dict()), a)


class TestIntersect(unittest.TestCase):
    def test_fifteen_minute_overlap_rejected_at_default_policy(self):
        a = [slot("2024-01-01", "10:00", "11:00")]
        b = [slot("2024-01-01", "10:45", "12:00")]
        self.assertIsNone(intersect(a, b, 30))
        self.assertIsNone(intersect(a, b))

    def test_fifteen_minute_overlap_returned_at_lower_threshold(self):
        a = [slot("2024-01-01", "10:00", "11:00")]
        b = [slot("2024-01-01", "10:45", "12:00")]
        self.assertEqual(intersect(a, b, 15), slot("2024-01-01", "10:45", "11:00"))

    def test_forty_minute_overlap(self):
        a = [slot("2024-01-01", "10:00", "11:00")]
        b = [slot("2024-01-01", "10:20", "11:30")]
        self.assertEqual(intersect(a, b, 30), slot("2024-01-01", "10:20", "11:00"))

    def test_different_dates_never_intersect(self):
        a = [slot("2024-01-01", "10:00", "12:00")]
        b = [slot("2024-01-02", "10:00", "12:00")]
        self.assertIsNone(intersect(a, b, 0))

    def test_zero_threshold_still_needs_positive_overlap(self):
        a = [slot("2024-01-01", "10:00", "11:00")]
        b = [slot("2024-01-01", "11:00", "12:00")]
        self.assertIsNone(intersect(a, b, 0))

    def test_first_qualifying_pair_wins_not_longest(self):
        a = [slot("2024-01-01", "10:00", "11:00"), slot("2024-01-01", "14:00", "18:00")]
        b = [slot("2024-01-01", "14:00", "18:00"), slot("2024-01-01", "10:00", "10:40")]
        # a[0] is the outer loop, so its 40 minute window beats the 4 hour one
        self.assertEqual(intersect(a, b), slot("2024-01-01", "10:00", "10:40"))

    def test_empty_inputs(self):
        self.assertIsNone(intersect([], [slot("2024-01-01", "10:00", "11:00")]))
        self.assertIsNone(intersect([slot("2024-01-01", "10:00", "11:00")], []))
