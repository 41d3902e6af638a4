"""Durable local cache.

A small JSON-file key-value store used as the offline fallback for the
remote stores, plus the queue of history entries that still have to be
written to the primary store.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from ...exceptions import StoreError
from ...models.history import WorkoutHistoryEntry


logger = logging.getLogger(__name__)


class LocalCache:
    """
    JSON-file key-value cache.

    The whole file is rewritten on every change (write to a temp file,
    then replace), so a crash never leaves a half-written cache.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._data: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable local cache {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2)
        os.replace(tmp_path, self.path)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value
            self._write()

    def delete(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._write()

    def keys(self, prefix: str = "") -> List[str]:
        with self._lock:
            return [k for k in self._data if k.startswith(prefix)]


class PendingEntryQueue:
    """
    History entries waiting to be written to the primary store.

    Entries are keyed by id, so queueing the same entry twice keeps one copy.
    """

    KEY_PREFIX = "pending_history:"

    def __init__(self, cache: LocalCache):
        self.cache = cache

    def _key(self, user_id: str) -> str:
        return f"{self.KEY_PREFIX}{user_id}"

    def add(self, user_id: str, entry: WorkoutHistoryEntry) -> None:
        pending = [e for e in self.cache.get(self._key(user_id), []) if e["id"] != entry.id]
        pending.append(entry.to_dict())
        self.cache.set(self._key(user_id), pending)
        logger.info(f"Queued history entry {entry.id} for user {user_id} ({len(pending)} pending)")

    def list(self, user_id: str) -> List[WorkoutHistoryEntry]:
        return [WorkoutHistoryEntry.from_dict(e) for e in self.cache.get(self._key(user_id), [])]

    def remove(self, user_id: str, entry_id: str) -> None:
        pending = [e for e in self.cache.get(self._key(user_id), []) if e["id"] != entry_id]
        if pending:
            self.cache.set(self._key(user_id), pending)
        else:
            self.cache.delete(self._key(user_id))

    def users(self) -> List[str]:
        return [k[len(self.KEY_PREFIX):] for k in self.cache.keys(self.KEY_PREFIX)]

    def flush(
        self,
        user_id: str,
        append: Callable[[str, WorkoutHistoryEntry], None],
    ) -> int:
        """
        Replay queued entries through ``append`` in queue order.

        Stops at the first StoreError; entries not yet written stay queued.

        Returns:
            Number of entries written
        """
        written = 0
        for entry in self.list(user_id):
            try:
                append(user_id, entry)
            except StoreError as e:
                logger.warning(
                    f"Flushing pending history for user {user_id} stopped after "
                    f"{written} entries: {e.message}"
                )
                break
            self.remove(user_id, entry.id)
            written += 1
        return written

    def count(self, user_id: Optional[str] = None) -> int:
        if user_id is not None:
            return len(self.cache.get(self._key(user_id), []))
        return sum(len(self.cache.get(k, [])) for k in self.cache.keys(self.KEY_PREFIX))
