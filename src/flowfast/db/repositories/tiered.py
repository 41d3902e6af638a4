"""Remote-primary stores with a durable local fallback.

Reads go to the primary store and refresh the local cache; when the
primary raises StoreError the cached copy is served instead. Without a
cached copy the StoreError propagates; only equipment defaults to an
empty list. Writes that fail on the primary are kept locally and the
StoreError is re-raised so the caller can warn the user.
"""

import logging
from typing import List, Optional

from .base import GoalsStore, HistoryStore
from .local_cache import LocalCache, PendingEntryQueue
from ...exceptions import StoreError
from ...models.history import WeeklyGoals, WorkoutHistoryEntry


logger = logging.getLogger(__name__)


class TieredHistoryStore(HistoryStore):
    """History store backed by a primary store and a LocalCache."""

    def __init__(self, primary: HistoryStore, cache: LocalCache, pending: Optional[PendingEntryQueue] = None):
        self.primary = primary
        self.cache = cache
        self.pending = pending or PendingEntryQueue(cache)

    def _cache_key(self, user_id: str) -> str:
        return f"history:{user_id}"

    def list(self, user_id: str) -> List[WorkoutHistoryEntry]:
        try:
            entries = self.primary.list(user_id)
            self.cache.set(self._cache_key(user_id), [e.to_dict() for e in entries])
        except StoreError as e:
            cached = self.cache.get(self._cache_key(user_id))
            if cached is None:
                logger.warning(f"History read failed for user {user_id} with no local copy: {e.message}")
                raise
            logger.warning(f"History read failed for user {user_id}, using local cache: {e.message}")
            entries = [WorkoutHistoryEntry.from_dict(d) for d in cached]

        # Unsynced entries still count towards metrics
        known_ids = {e.id for e in entries}
        entries.extend(e for e in self.pending.list(user_id) if e.id not in known_ids)
        return entries

    def _append_primary(self, user_id: str, entry: WorkoutHistoryEntry) -> None:
        self.primary.append(user_id, entry)
        cached = self.cache.get(self._cache_key(user_id), [])
        cached.append(entry.to_dict())
        self.cache.set(self._cache_key(user_id), cached)

    def append(self, user_id: str, entry: WorkoutHistoryEntry) -> None:
        try:
            self._append_primary(user_id, entry)
        except StoreError:
            self.pending.add(user_id, entry)
            raise

    def flush_pending(self, user_id: str) -> int:
        """Write queued entries to the primary store."""
        return self.pending.flush(user_id, self._append_primary)


class TieredGoalsStore(GoalsStore):
    """Goals/equipment store backed by a primary store and a LocalCache."""

    def __init__(self, primary: GoalsStore, cache: LocalCache):
        self.primary = primary
        self.cache = cache

    def get(self, user_id: str) -> WeeklyGoals:
        key = f"goals:{user_id}"
        try:
            goals = self.primary.get(user_id)
        except StoreError as e:
            cached = self.cache.get(key)
            if cached is None:
                logger.warning(f"Goals read failed for user {user_id} with no local copy: {e.message}")
                raise
            logger.warning(f"Goals read failed for user {user_id}, using local cache: {e.message}")
            return WeeklyGoals.from_dict(cached)
        self.cache.set(key, goals.to_dict())
        return goals

    def set(self, user_id: str, goals: WeeklyGoals) -> None:
        self.cache.set(f"goals:{user_id}", goals.to_dict())
        self.primary.set(user_id, goals)

    def get_equipment(self, user_id: str) -> List[str]:
        key = f"equipment:{user_id}"
        try:
            equipment = self.primary.get_equipment(user_id)
        except StoreError as e:
            logger.warning(f"Equipment read failed for user {user_id}, using local cache: {e.message}")
            return list(self.cache.get(key, []))
        self.cache.set(key, list(equipment))
        return equipment

    def set_equipment(self, user_id: str, equipment: List[str]) -> None:
        self.cache.set(f"equipment:{user_id}", list(equipment))
        self.primary.set_equipment(user_id, equipment)
