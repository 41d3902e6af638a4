"""In-memory stores for tests and local development."""

import copy
from typing import Dict, List, Optional

from .base import GoalsStore, HistoryStore, SessionStore
from ...models.history import WeeklyGoals, WorkoutHistoryEntry
from ...models.session import WorkoutSession


class InMemoryHistoryStore(HistoryStore):
    """History kept in a dict of lists."""

    def __init__(self, initial: Optional[Dict[str, List[WorkoutHistoryEntry]]] = None):
        self._entries: Dict[str, List[WorkoutHistoryEntry]] = {
            user_id: list(entries) for user_id, entries in (initial or {}).items()
        }

    def list(self, user_id: str) -> List[WorkoutHistoryEntry]:
        return list(self._entries.get(user_id, []))

    def append(self, user_id: str, entry: WorkoutHistoryEntry) -> None:
        self._entries.setdefault(user_id, []).append(entry)


class InMemoryGoalsStore(GoalsStore):
    """Goals and equipment kept in dicts; unset users get defaults."""

    def __init__(self):
        self._goals: Dict[str, WeeklyGoals] = {}
        self._equipment: Dict[str, List[str]] = {}

    def get(self, user_id: str) -> WeeklyGoals:
        goals = self._goals.get(user_id)
        return copy.copy(goals) if goals else WeeklyGoals()

    def set(self, user_id: str, goals: WeeklyGoals) -> None:
        self._goals[user_id] = copy.copy(goals)

    def get_equipment(self, user_id: str) -> List[str]:
        return list(self._equipment.get(user_id, []))

    def set_equipment(self, user_id: str, equipment: List[str]) -> None:
        self._equipment[user_id] = list(equipment)


class InMemorySessionStore(SessionStore):
    """
    Session slot holding the serialized session.

    Sessions are stored as dicts so a loaded session is a fresh copy, the
    same as reading it back from browser/session storage.
    """

    def __init__(self):
        self._sessions: Dict[str, dict] = {}

    def save(self, user_id: str, session: WorkoutSession) -> None:
        self._sessions[user_id] = session.to_dict()

    def load(self, user_id: str) -> Optional[WorkoutSession]:
        data = self._sessions.get(user_id)
        if data is None:
            return None
        return WorkoutSession.from_dict(data)

    def clear(self, user_id: str) -> None:
        self._sessions.pop(user_id, None)
