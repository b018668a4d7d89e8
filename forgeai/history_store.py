"""
SQLite persistence for user profiles and workout history.
"""

import json
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone

from loguru import logger

from forgeai.errors import PersistenceError
from forgeai.models import HistoryEntry, UserProfile
from forgeai.plan_parser import build_workout_plan

# Stored rows without usable workout detail load as this plan
PAST_WORKOUT_FALLBACK = {"title": "Past Workout"}


def _utc_now():
    return datetime.now(timezone.utc).isoformat()


class HistoryStore:
    """Small SQLite wrapper for profile and history storage."""

    def __init__(self, db_path):
        self.db_path = db_path
        parent = os.path.dirname(db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        # Streamlit reruns scripts on worker threads
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row

    def close(self):
        self.conn.close()

    @contextmanager
    def transaction(self):
        """Context manager for atomic write operations."""
        try:
            yield
            self.conn.commit()
        except sqlite3.Error as exc:
            self.conn.rollback()
            raise PersistenceError(str(exc)) from exc
        except Exception:
            self.conn.rollback()
            raise

    def init_schema(self):
        """Create core schema if it does not already exist."""
        self.conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS user_profiles (
                user_id TEXT PRIMARY KEY,
                name TEXT,
                goal TEXT,
                equipment TEXT,
                fitness_level TEXT,
                availability TEXT,
                limitations TEXT,
                initial_weight REAL,
                target_weight REAL,
                current_weight REAL,
                unit TEXT,
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS workout_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id TEXT NOT NULL,
                date TEXT NOT NULL,
                status TEXT NOT NULL,
                difficulty INTEGER,
                feedback TEXT,
                workout_title TEXT,
                workout_details TEXT,
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE INDEX IF NOT EXISTS idx_workout_history_user_date
                ON workout_history(user_id, date);
            """
        )
        self.conn.commit()

    def fetch_history(self, user_id):
        """
        Fetch a user's history, most recent first.

        Args:
            user_id: Owning identity

        Returns:
            List[HistoryEntry]
        """
        try:
            rows = self.conn.execute(
                """
                SELECT date, status, difficulty, feedback, workout_title, workout_details
                FROM workout_history
                WHERE user_id = ?
                ORDER BY date DESC, id DESC
                """,
                (user_id,),
            ).fetchall()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not load history for {user_id}: {exc}") from exc

        return [self._row_to_entry(row) for row in rows]

    def _row_to_entry(self, row):
        details = None
        if row["workout_details"]:
            try:
                details = json.loads(row["workout_details"])
            except ValueError:
                logger.warning(f"Unreadable workout details for history row dated {row['date']}")
        if not isinstance(details, dict):
            details = dict(PAST_WORKOUT_FALLBACK)
            if row["workout_title"]:
                details["title"] = row["workout_title"]

        return HistoryEntry(
            date=row["date"],
            status=row["status"],
            difficulty=row["difficulty"],
            feedback=row["feedback"] or "",
            workout=build_workout_plan(details),
        )

    def insert_history(self, user_id, entry):
        """Append one history row for a user."""
        with self.transaction():
            self.conn.execute(
                """
                INSERT INTO workout_history (
                    user_id,
                    date,
                    status,
                    difficulty,
                    feedback,
                    workout_title,
                    workout_details
                )
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    entry.date,
                    entry.status,
                    entry.difficulty,
                    entry.feedback,
                    entry.workout.title,
                    json.dumps(entry.workout.to_dict()),
                ),
            )

    def get_profile(self, user_id):
        """Return the stored UserProfile, or None when the user has none."""
        try:
            row = self.conn.execute(
                "SELECT * FROM user_profiles WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not load profile for {user_id}: {exc}") from exc

        if not row:
            return None

        try:
            equipment = json.loads(row["equipment"] or "[]")
        except ValueError:
            equipment = []

        return UserProfile(
            user_id=row["user_id"],
            name=row["name"],
            goal=row["goal"] or "",
            equipment=equipment if isinstance(equipment, list) else [],
            level=row["fitness_level"] or "beginner",
            availability=row["availability"] or "",
            limitations=row["limitations"] or "",
            initial_weight=row["initial_weight"] or 0,
            target_weight=row["target_weight"] or 0,
            current_weight=row["current_weight"],
            unit=row["unit"] or "kg",
        )

    def save_profile(self, user_id, profile):
        """Insert or update the profile fields collected at onboarding."""
        with self.transaction():
            self.conn.execute(
                """
                INSERT INTO user_profiles (
                    user_id,
                    name,
                    goal,
                    equipment,
                    fitness_level,
                    availability,
                    limitations,
                    initial_weight,
                    target_weight,
                    current_weight,
                    unit,
                    updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    name = COALESCE(excluded.name, user_profiles.name),
                    goal = excluded.goal,
                    equipment = excluded.equipment,
                    fitness_level = excluded.fitness_level,
                    availability = excluded.availability,
                    limitations = excluded.limitations,
                    initial_weight = excluded.initial_weight,
                    target_weight = excluded.target_weight,
                    current_weight = excluded.current_weight,
                    unit = excluded.unit,
                    updated_at = excluded.updated_at
                """,
                (
                    user_id,
                    profile.name,
                    profile.goal,
                    json.dumps(profile.equipment),
                    profile.level,
                    profile.availability,
                    profile.limitations,
                    profile.initial_weight,
                    profile.target_weight,
                    profile.initial_weight,
                    profile.unit,
                    _utc_now(),
                ),
            )

    def upsert_weight(self, user_id, weight):
        """Set the current weight, creating a bare profile row if needed."""
        with self.transaction():
            self.conn.execute(
                """
                INSERT INTO user_profiles (user_id, current_weight, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    current_weight = excluded.current_weight,
                    updated_at = excluded.updated_at
                """,
                (user_id, weight, _utc_now()),
            )

