"""Store implementations for history, goals and workout sessions."""

from .base import HistoryStore, GoalsStore, SessionStore
from .memory import InMemoryHistoryStore, InMemoryGoalsStore, InMemorySessionStore
from .sqlite import SQLiteDatabase, SQLiteHistoryStore, SQLiteGoalsStore, SQLiteSessionStore
from .local_cache import LocalCache, PendingEntryQueue
from .tiered import TieredHistoryStore, TieredGoalsStore

__all__ = [
    "HistoryStore",
    "GoalsStore",
    "SessionStore",
    "InMemoryHistoryStore",
    "InMemoryGoalsStore",
    "InMemorySessionStore",
    "SQLiteDatabase",
    "SQLiteHistoryStore",
    "SQLiteGoalsStore",
    "SQLiteSessionStore",
    "LocalCache",
    "PendingEntryQueue",
    "TieredHistoryStore",
    "TieredGoalsStore",
]
