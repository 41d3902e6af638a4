"""Base store interfaces.

The coaching core only ever talks to these abstractions. Implementations
may raise StoreError for transient persistence failures.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ...models.history import WeeklyGoals, WorkoutHistoryEntry
from ...models.session import WorkoutSession


class HistoryStore(ABC):
    """
    Append-only per-user collection of WorkoutHistoryEntry.

    Entries are never edited after they are appended.
    """

    @abstractmethod
    def list(self, user_id: str) -> List[WorkoutHistoryEntry]:
        """
        Return all entries for a user.

        Args:
            user_id: The user to read history for

        Returns:
            Entries in no guaranteed order; empty for unknown users

        Raises:
            StoreError: If the store cannot be reached
        """
        pass

    @abstractmethod
    def append(self, user_id: str, entry: WorkoutHistoryEntry) -> None:
        """
        Append one entry to a user's history.

        Raises:
            StoreError: If the entry could not be persisted
        """
        pass


class GoalsStore(ABC):
    """Per-user weekly goals and equipment profile."""

    @abstractmethod
    def get(self, user_id: str) -> WeeklyGoals:
        """Return the user's goals, or defaults when none are set."""
        pass

    @abstractmethod
    def set(self, user_id: str, goals: WeeklyGoals) -> None:
        pass

    @abstractmethod
    def get_equipment(self, user_id: str) -> List[str]:
        """Return the user's available equipment (empty when unset)."""
        pass

    @abstractmethod
    def set_equipment(self, user_id: str, equipment: List[str]) -> None:
        pass


class SessionStore(ABC):
    """Single short-lived slot per user holding the active workout session."""

    @abstractmethod
    def save(self, user_id: str, session: WorkoutSession) -> None:
        """Store a session, overwriting any previous one."""
        pass

    @abstractmethod
    def load(self, user_id: str) -> Optional[WorkoutSession]:
        """Return the stored session, or None."""
        pass

    @abstractmethod
    def clear(self, user_id: str) -> None:
        pass
