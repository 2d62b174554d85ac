"""
Tests for tracking/daily_usage.py and tracking/analytics.py.
"""

import sys
import unittest
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from tracking.analytics import format_duration, summarise_usage
from tracking.daily_usage import DailyUsage, DailyUsageTracker, get_daily_cap_seconds

DAY_ONE = datetime(2024, 1, 1, 12, 0, 0)
DAY_TWO = datetime(2024, 1, 2, 0, 0, 1)


class TestPlanCaps(unittest.TestCase):
    """Daily caps per plan tier."""

    def test_caps(self):
        self.assertEqual(get_daily_cap_seconds("free"), 3600)
        self.assertEqual(get_daily_cap_seconds("PRO"), 10800)
        self.assertIsNone(get_daily_cap_seconds("advanced"))

    def test_unknown_tier_uses_free_cap(self):
        self.assertEqual(get_daily_cap_seconds("gold"), 3600)

    def test_unlimited_plan_never_reaches_cap(self):
        usage = DailyUsage(date="2024-01-01", plan_tier="advanced", consumed_seconds=100000)
        self.assertFalse(usage.has_reached_daily_cap)
        self.assertEqual(usage.daily_cap_progress, 0.0)


class TestDailyUsageTracker(unittest.TestCase):
    """Earned/consumed accounting with day rollover."""

    def setUp(self):
        self.tracker = DailyUsageTracker(plan_tier="free")

    def test_cap_reached_at_limit(self):
        self.tracker.consume_time(3599, DAY_ONE)
        self.assertTrue(self.tracker.can_unlock(DAY_ONE))
        self.tracker.consume_time(1, DAY_ONE)
        self.assertTrue(self.tracker.has_hit_daily_cap(DAY_ONE))
        self.assertFalse(self.tracker.can_unlock(DAY_ONE))

    def test_new_day_resets(self):
        self.tracker.add_earned_time(600, DAY_ONE)
        self.tracker.consume_time(3600, DAY_ONE)
        usage = self.tracker.get_today_usage(DAY_TWO)
        self.assertEqual(usage.date, "2024-01-02")
        self.assertEqual(usage.earned_seconds, 0)
        self.assertEqual(usage.consumed_seconds, 0)
        self.assertTrue(self.tracker.can_unlock(DAY_TWO))

    def test_available_seconds(self):
        self.tracker.add_earned_time(1000, DAY_ONE)
        self.tracker.consume_time(200, DAY_ONE)
        self.assertEqual(self.tracker.get_available_seconds(DAY_ONE), 800)

        self.tracker.add_earned_time(4000, DAY_ONE)
        self.tracker.consume_time(2800, DAY_ONE)
        # 3000 consumed: only 600 left under the free cap
        self.assertEqual(self.tracker.get_available_seconds(DAY_ONE), 600)

    def test_snapshot_is_a_copy(self):
        usage = self.tracker.get_today_usage(DAY_ONE)
        usage.consumed_seconds = 5000
        self.assertEqual(self.tracker.get_today_usage(DAY_ONE).consumed_seconds, 0)

    def test_negative_values_rejected(self):
        with self.assertRaises(ValueError):
            self.tracker.add_earned_time(-1, DAY_ONE)
        with self.assertRaises(ValueError):
            self.tracker.consume_time(-1, DAY_ONE)

    def test_update_plan_tier(self):
        self.tracker.consume_time(3600, DAY_ONE)
        self.tracker.update_plan_tier("pro", DAY_ONE)
        self.assertEqual(self.tracker.plan_tier, "pro")
        self.assertTrue(self.tracker.can_unlock(DAY_ONE))
        self.assertEqual(self.tracker.get_today_usage(DAY_ONE).daily_cap_seconds, 10800)


class TestAnalytics(unittest.TestCase):
    """Display formatting."""

    def test_format_duration(self):
        self.assertEqual(format_duration(0), "0 sec")
        self.assertEqual(format_duration(1), "1 sec")
        self.assertEqual(format_duration(90), "1 min 30 secs")
        self.assertEqual(format_duration(3725), "1 hr 2 mins")
        self.assertEqual(format_duration(-5), "0 sec")
        self.assertEqual(format_duration(7201), "2 hrs")

    def test_summarise_usage(self):
        usage = DailyUsage(
            date="2024-01-01", plan_tier="free", earned_seconds=1200, consumed_seconds=1800
        )
        summary = summarise_usage(usage)
        self.assertEqual(summary["remaining_seconds"], 0)
        self.assertEqual(summary["earned_minutes"], 20)
        self.assertEqual(summary["progress"], 0.5)
        self.assertEqual(summary["cap_text"], "1 hr")
        self.assertFalse(summary["has_reached_cap"])

    def test_summarise_unlimited(self):
        summary = summarise_usage(DailyUsage(date="2024-01-01", plan_tier="advanced"))
        self.assertEqual(summary["cap_text"], "Unlimited")
        self.assertIsNone(summary["daily_cap_seconds"])


if __name__ == "__main__":
    unittest.main()
