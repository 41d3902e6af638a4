"""SQLite-backed history, goals and session stores.

One database file holds all three tables. List-valued fields are stored as
JSON text columns.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional, Union

from .base import GoalsStore, HistoryStore, SessionStore
from ...exceptions import StoreError
from ...models.history import WeeklyGoals, WorkoutHistoryEntry
from ...models.session import WorkoutSession
from ...utils.dates import parse_datetime


logger = logging.getLogger(__name__)


class SQLiteDatabase:
    """Connection factory and schema owner for the SQLite stores."""

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables_exist()

    @contextmanager
    def connection(self, operation: str = "query", user_id: Optional[str] = None):
        """Yield a connection; commits on success, rolls back on error.

        sqlite3 errors are re-raised as StoreError.
        """
        try:
            conn = sqlite3.connect(str(self.db_path))
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open database: {e}", operation=operation, user_id=user_id)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(f"SQLite {operation} failed for user {user_id}: {e}")
            raise StoreError(f"Database {operation} failed: {e}", operation=operation, user_id=user_id)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _ensure_tables_exist(self):
        with self.connection("migrate") as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS workout_history (
                    id TEXT NOT NULL,
                    user_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    energy TEXT NOT NULL,
                    time_minutes_planned INTEGER NOT NULL DEFAULT 0,
                    time_minutes_actual INTEGER,
                    focus_areas_json TEXT NOT NULL DEFAULT '[]',
                    equipment_json TEXT NOT NULL DEFAULT '[]',
                    exercises_count INTEGER NOT NULL DEFAULT 0,
                    total_sets INTEGER NOT NULL DEFAULT 0,
                    total_estimated_calories REAL,
                    feedback_difficulty TEXT,
                    rpe INTEGER,
                    notes TEXT,
                    exercises_json TEXT,
                    PRIMARY KEY (user_id, id)
                )
            """)
            conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_workout_history_user_date
                ON workout_history(user_id, date)
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS profiles (
                    user_id TEXT PRIMARY KEY,
                    primary_goal TEXT,
                    target_workouts_per_week INTEGER,
                    target_minutes_per_week INTEGER,
                    equipment_json TEXT NOT NULL DEFAULT '[]'
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS workout_sessions (
                    user_id TEXT PRIMARY KEY,
                    session_json TEXT NOT NULL
                )
            """)


class SQLiteHistoryStore(HistoryStore):
    """Workout history persisted in the workout_history table."""

    def __init__(self, db: SQLiteDatabase):
        self.db = db

    def _entry_to_row(self, user_id: str, entry: WorkoutHistoryEntry) -> dict:
        data = entry.to_dict()
        return {
            "id": data["id"],
            "user_id": user_id,
            "date": data["date"],
            "energy": data["energy"],
            "time_minutes_planned": data["time_minutes_planned"],
            "time_minutes_actual": data["time_minutes_actual"],
            "focus_areas_json": json.dumps(data["focus_areas"]),
            "equipment_json": json.dumps(data["equipment"]),
            "exercises_count": data["exercises_count"],
            "total_sets": data["total_sets"],
            "total_estimated_calories": data["total_estimated_calories"],
            "feedback_difficulty": data["feedback_difficulty"],
            "rpe": data["rpe"],
            "notes": data["notes"],
            "exercises_json": json.dumps(data["exercises"]) if data["exercises"] is not None else None,
        }

    def _row_to_entry(self, row: sqlite3.Row) -> WorkoutHistoryEntry:
        return WorkoutHistoryEntry.from_dict({
            "id": row["id"],
            "date": parse_datetime(row["date"]),
            "energy": row["energy"],
            "time_minutes_planned": row["time_minutes_planned"],
            "time_minutes_actual": row["time_minutes_actual"],
            "focus_areas": json.loads(row["focus_areas_json"] or "[]"),
            "equipment": json.loads(row["equipment_json"] or "[]"),
            "exercises_count": row["exercises_count"],
            "total_sets": row["total_sets"],
            "total_estimated_calories": row["total_estimated_calories"],
            "feedback_difficulty": row["feedback_difficulty"],
            "rpe": row["rpe"],
            "notes": row["notes"],
            "exercises": json.loads(row["exercises_json"]) if row["exercises_json"] else None,
        })

    def list(self, user_id: str) -> List[WorkoutHistoryEntry]:
        with self.db.connection("list_history", user_id) as conn:
            rows = conn.execute(
                "SELECT * FROM workout_history WHERE user_id = ? ORDER BY date DESC",
                (user_id,),
            ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def append(self, user_id: str, entry: WorkoutHistoryEntry) -> None:
        row = self._entry_to_row(user_id, entry)
        columns = ", ".join(row.keys())
        placeholders = ", ".join(f":{key}" for key in row.keys())
        # Re-appending the same entry id is a no-op (pending-queue retries)
        with self.db.connection("append_history", user_id) as conn:
            conn.execute(
                f"INSERT OR IGNORE INTO workout_history ({columns}) VALUES ({placeholders})",
                row,
            )


class SQLiteGoalsStore(GoalsStore):
    """Weekly goals and equipment persisted in the profiles table."""

    def __init__(self, db: SQLiteDatabase):
        self.db = db

    def _get_row(self, user_id: str, operation: str) -> Optional[sqlite3.Row]:
        with self.db.connection(operation, user_id) as conn:
            return conn.execute(
                "SELECT * FROM profiles WHERE user_id = ?", (user_id,)
            ).fetchone()

    def get(self, user_id: str) -> WeeklyGoals:
        row = self._get_row(user_id, "get_goals")
        if row is None:
            return WeeklyGoals()
        return WeeklyGoals.from_dict({
            "primary_goal": row["primary_goal"],
            "target_workouts_per_week": row["target_workouts_per_week"],
            "target_minutes_per_week": row["target_minutes_per_week"],
        })

    def set(self, user_id: str, goals: WeeklyGoals) -> None:
        with self.db.connection("set_goals", user_id) as conn:
            conn.execute(
                """
                INSERT INTO profiles (user_id, primary_goal, target_workouts_per_week, target_minutes_per_week)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    primary_goal = excluded.primary_goal,
                    target_workouts_per_week = excluded.target_workouts_per_week,
                    target_minutes_per_week = excluded.target_minutes_per_week
                """,
                (
                    user_id,
                    goals.primary_goal.value,
                    goals.target_workouts_per_week,
                    goals.target_minutes_per_week,
                ),
            )

    def get_equipment(self, user_id: str) -> List[str]:
        row = self._get_row(user_id, "get_equipment")
        if row is None:
            return []
        return json.loads(row["equipment_json"] or "[]")

    def set_equipment(self, user_id: str, equipment: List[str]) -> None:
        with self.db.connection("set_equipment", user_id) as conn:
            conn.execute(
                """
                INSERT INTO profiles (user_id, equipment_json) VALUES (?, ?)
                ON CONFLICT(user_id) DO UPDATE SET equipment_json = excluded.equipment_json
                """,
                (user_id, json.dumps(list(equipment))),
            )


class SQLiteSessionStore(SessionStore):
    """The active session slot, one row per user."""

    def __init__(self, db: SQLiteDatabase):
        self.db = db

    def save(self, user_id: str, session: WorkoutSession) -> None:
        with self.db.connection("save_session", user_id) as conn:
            conn.execute(
                "INSERT OR REPLACE INTO workout_sessions (user_id, session_json) VALUES (?, ?)",
                (user_id, json.dumps(session.to_dict())),
            )

    def load(self, user_id: str) -> Optional[WorkoutSession]:
        with self.db.connection("load_session", user_id) as conn:
            row = conn.execute(
                "SELECT session_json FROM workout_sessions WHERE user_id = ?", (user_id,)
            ).fetchone()
        if row is None:
            return None
        try:
            return WorkoutSession.from_dict(json.loads(row["session_json"]))
        except (ValueError, KeyError) as e:
            logger.warning(f"Discarding unreadable session for user {user_id}: {e}")
            self.clear(user_id)
            return None

    def clear(self, user_id: str) -> None:
        with self.db.connection("clear_session", user_id) as conn:
            conn.execute("DELETE FROM workout_sessions WHERE user_id = ?", (user_id,))
