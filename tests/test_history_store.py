"""Tests for SQLite profile and history persistence."""

import os
import tempfile
import unittest

from forgeai.errors import PersistenceError
from forgeai.history_store import HistoryStore
from forgeai.models import HistoryEntry, UserProfile
from forgeai.plan_parser import build_workout_plan


class HistoryStoreTests(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.store = HistoryStore(os.path.join(self.tmpdir.name, "nested", "forge.db"))
        self.store.init_schema()

    def tearDown(self):
        self.store.close()
        self.tmpdir.cleanup()

    def _entry(self, date, title, status="completed"):
        plan = build_workout_plan({"title": title, "main": [{"name": "Squat", "sets": 5}]})
        return HistoryEntry(date=date, workout=plan, status=status, feedback="ok", difficulty=6)

    def test_history_round_trip_newest_first(self):
        older = self._entry("2026-03-01T08:00:00", "Older")
        newer = self._entry("2026-03-03T08:00:00", "Newer", status="partial")
        self.store.insert_history("alice", older)
        self.store.insert_history("alice", newer)
        self.store.insert_history("bob", self._entry("2026-03-02T08:00:00", "Bob's"))

        history = self.store.fetch_history("alice")

        self.assertEqual([e.workout.title for e in history], ["Newer", "Older"])
        self.assertEqual(history[1], older)

    def test_row_without_details_loads_as_past_workout(self):
        self.store.conn.execute(
            "INSERT INTO workout_history (user_id, date, status, difficulty) VALUES (?, ?, ?, ?)",
            ("alice", "2026-03-01", "skipped", 4),
        )
        self.store.conn.commit()

        entry = self.store.fetch_history("alice")[0]
        self.assertEqual(entry.workout.title, "Past Workout")
        self.assertEqual(entry.workout.main_exercises, [])
        self.assertEqual(entry.feedback, "")

    def test_unreadable_details_fall_back_to_title_column(self):
        self.store.conn.execute(
            """
            INSERT INTO workout_history (user_id, date, status, workout_title, workout_details)
            VALUES (?, ?, ?, ?, ?)
            """,
            ("alice", "2026-03-01", "completed", "Leg Day", "{not json"),
        )
        self.store.conn.commit()

        self.assertEqual(self.store.fetch_history("alice")[0].workout.title, "Leg Day")

    def test_profile_upsert(self):
        self.assertIsNone(self.store.get_profile("alice"))

        profile = UserProfile(
            user_id="alice",
            goal="Strength",
            equipment=["Barbell", "Rack"],
            level="advanced",
            initial_weight=70,
            target_weight=75,
        )
        self.store.save_profile("alice", profile)
        self.store.save_profile("alice", profile.model_copy(update={"goal": "Power"}))

        loaded = self.store.get_profile("alice")
        self.assertEqual(loaded.goal, "Power")
        self.assertEqual(loaded.equipment, ["Barbell", "Rack"])
        self.assertEqual(loaded.level, "advanced")
        self.assertEqual(loaded.current_weight, 70)

    def test_upsert_weight_creates_and_updates(self):
        self.store.upsert_weight("carol", 90)
        self.assertEqual(self.store.get_profile("carol").current_weight, 90)

        self.store.save_profile("carol", UserProfile(goal="Cut", initial_weight=90, target_weight=80))
        self.store.upsert_weight("carol", 88.5)
        loaded = self.store.get_profile("carol")
        self.assertEqual(loaded.current_weight, 88.5)
        self.assertEqual(loaded.goal, "Cut")

    def test_failed_write_raises_persistence_error(self):
        self.store.conn.execute("DROP TABLE workout_history")
        with self.assertRaises(PersistenceError):
            self.store.insert_history("alice", self._entry("2026-03-01", "Lost"))
        with self.assertRaises(PersistenceError):
            self.store.fetch_history("alice")


if __name__ == "__main__":
    unittest.main()
