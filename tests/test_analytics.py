"""Tests for dashboard analytics."""

import unittest
from datetime import date

from forgeai.analytics import WorkoutAnalytics, sort_history
from forgeai.models import AppState, HistoryEntry, UserProfile
from forgeai.plan_parser import build_workout_plan


def make_entry(when, difficulty=5, status="completed"):
    return HistoryEntry(
        date=when,
        workout=build_workout_plan({"title": when}),
        status=status,
        difficulty=difficulty,
    )


class SortHistoryTests(unittest.TestCase):
    def test_orders_and_puts_bad_dates_at_epoch(self):
        history = [
            make_entry("2026-03-02T10:00:00"),
            make_entry("garbage"),
            make_entry("2026-03-05T10:00:00Z"),
        ]
        latest = [e.date for e in sort_history(history)]
        oldest = [e.date for e in sort_history(history, order="oldest")]

        self.assertEqual(latest, ["2026-03-05T10:00:00Z", "2026-03-02T10:00:00", "garbage"])
        self.assertEqual(oldest, list(reversed(latest)))


class WorkoutAnalyticsTests(unittest.TestCase):
    def test_difficulty_trend_empty(self):
        self.assertEqual(WorkoutAnalytics(AppState()).difficulty_trend(), [{"name": "S0", "val": 0}])

    def test_difficulty_trend_oldest_to_newest(self):
        history = [make_entry(f"2026-03-{day:02d}", difficulty=day % 10 + 1) for day in range(1, 13)]
        trend = WorkoutAnalytics(AppState(history=history)).difficulty_trend(sessions=3)
        self.assertEqual(trend, [
            {"name": "S1", "val": 1},
            {"name": "S2", "val": 2},
            {"name": "S3", "val": 3},
        ])

    def test_sessions_on(self):
        state = AppState(history=[make_entry("2026-03-02T07:00:00"), make_entry("2026-03-03T07:00:00")])
        analytics = WorkoutAnalytics(state)
        self.assertEqual(len(analytics.sessions_on(date(2026, 3, 2))), 1)
        self.assertEqual(analytics.sessions_on("2026-03-04"), [])

    def test_weight_progress(self):
        profile = UserProfile(initial_weight=90, target_weight=80)
        self.assertEqual(WorkoutAnalytics(AppState(profile=profile, current_weight=85)).weight_progress(), 50)
        self.assertEqual(WorkoutAnalytics(AppState(profile=profile, current_weight=95)).weight_progress(), 0)
        self.assertEqual(WorkoutAnalytics(AppState(profile=profile, current_weight=70)).weight_progress(), 100)

        flat = UserProfile(initial_weight=80, target_weight=80)
        self.assertEqual(WorkoutAnalytics(AppState(profile=flat, current_weight=80)).weight_progress(), 0)

    def test_weight_delta_and_remaining(self):
        analytics = WorkoutAnalytics(
            AppState(profile=UserProfile(initial_weight=90, target_weight=80), current_weight=86.4)
        )
        self.assertEqual(analytics.weight_delta(), -3.6)
        self.assertEqual(analytics.remaining_to_goal(), -6.4)

    def test_status_breakdown(self):
        state = AppState(history=[
            make_entry("2026-03-01", status="completed"),
            make_entry("2026-03-02", status="skipped"),
            make_entry("2026-03-03", status="completed"),
        ])
        self.assertEqual(
            WorkoutAnalytics(state).status_breakdown(),
            {"completed": 2, "skipped": 1, "partial": 0},
        )


if __name__ == "__main__":
    unittest.main()
