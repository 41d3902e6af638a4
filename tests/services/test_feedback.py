"""Tests for post-workout feedback processing."""

import pytest

from flowfast.db.repositories import InMemoryHistoryStore, LocalCache, PendingEntryQueue
from flowfast.exceptions import FeedbackValidationError, StoreError
from flowfast.models.history import DifficultyFeedback
from flowfast.models.workouts import EnergyLevel
from flowfast.services.feedback import (
    SAVE_DEGRADED_WARNING,
    SAVE_FAILED_WARNING,
    FeedbackProcessor,
    build_history_entry,
    map_difficulty,
)


class FlakyHistoryStore(InMemoryHistoryStore):
    """History store whose appends fail while ``available`` is False."""

    def __init__(self):
        super().__init__()
        self.available = False

    def append(self, user_id, entry):
        if not self.available:
            raise StoreError("history store offline", operation="append", user_id=user_id)
        super().append(user_id, entry)


@pytest.fixture
def pending(tmp_path):
    return PendingEntryQueue(LocalCache(tmp_path / "cache.json"))


class TestMapDifficulty:

    @pytest.mark.parametrize("rating,energy,expected", [
        (1, EnergyLevel.LOW, DifficultyFeedback.COULDNT_FINISH),
        (3, EnergyLevel.LOW, DifficultyFeedback.COULDNT_FINISH),
        (4, EnergyLevel.LOW, DifficultyFeedback.TOO_EASY),
        (1, EnergyLevel.MEDIUM, DifficultyFeedback.TOO_HARD),
        (2, EnergyLevel.HIGH, DifficultyFeedback.TOO_HARD),
        (3, EnergyLevel.MEDIUM, DifficultyFeedback.JUST_RIGHT),
        (4, EnergyLevel.HIGH, DifficultyFeedback.TOO_EASY),
        (5, EnergyLevel.MEDIUM, DifficultyFeedback.TOO_EASY),
    ])
    def test_mapping(self, rating, energy, expected):
        assert map_difficulty(rating, energy) == expected


class TestBuildHistoryEntry:

    def test_uses_request_context(self, sample_plan, now):
        entry = build_history_entry(sample_plan, DifficultyFeedback.JUST_RIGHT, 6, "felt good", now)

        assert entry.id == sample_plan.id
        assert entry.date == now
        assert entry.energy == EnergyLevel.HIGH
        assert entry.time_minutes_planned == 25
        assert entry.focus_areas == ["core", "upper-body"]
        assert entry.equipment == ["mat"]
        assert entry.exercises_count == 2
        assert entry.total_sets == 2
        assert entry.total_estimated_calories == 30
        assert entry.rpe == 6
        assert entry.notes == "felt good"
        assert [e.name for e in entry.exercises] == ["Push-ups", "Plank Hold"]

    def test_without_context_falls_back_to_plan(self, sample_plan, now):
        sample_plan.context = None
        entry = build_history_entry(sample_plan, DifficultyFeedback.TOO_EASY, 3, None, now)

        assert entry.energy == EnergyLevel.MEDIUM
        assert entry.time_minutes_planned == 20
        assert entry.focus_areas == ["core"]
        assert entry.equipment == []


class TestFeedbackProcessor:

    def test_saves_entry(self, sample_plan, now):
        store = InMemoryHistoryStore()
        result = FeedbackProcessor(store).submit("u1", sample_plan, 3, "medium", 6, now=now)

        assert result.saved
        assert result.warning is None
        assert result.entry.feedback_difficulty == DifficultyFeedback.JUST_RIGHT
        assert store.list("u1") == [result.entry]

    @pytest.mark.parametrize("rating,energy,rpe", [
        (0, "medium", 5),
        (6, "medium", 5),
        (3, "medium", 0),
        (3, "medium", 11),
        (3, "exhausted", 5),
        (True, "medium", 5),
    ])
    def test_rejects_invalid_feedback(self, sample_plan, rating, energy, rpe):
        store = InMemoryHistoryStore()
        with pytest.raises(FeedbackValidationError):
            FeedbackProcessor(store).submit("u1", sample_plan, rating, energy, rpe)
        assert store.list("u1") == []

    def test_store_outage_queues_entry(self, sample_plan, pending, now):
        store = FlakyHistoryStore()
        result = FeedbackProcessor(store, pending).submit("u1", sample_plan, 4, "high", 5, now=now)

        assert result.saved
        assert result.warning == SAVE_DEGRADED_WARNING
        assert [e.id for e in pending.list("u1")] == [sample_plan.id]
        assert store.list("u1") == []

    def test_store_outage_without_queue(self, sample_plan):
        result = FeedbackProcessor(FlakyHistoryStore()).submit("u1", sample_plan, 4, "high", 5)
        assert not result.saved
        assert result.warning == SAVE_FAILED_WARNING

    def test_retry_pending_writes_queued_entries(self, sample_plan, pending, now):
        store = FlakyHistoryStore()
        processor = FeedbackProcessor(store, pending)
        processor.submit("u1", sample_plan, 4, "high", 5, now=now)

        assert processor.retry_pending("u1") == 0
        assert pending.count("u1") == 1

        store.available = True
        assert processor.retry_pending("u1") == 1
        assert pending.count("u1") == 0
        assert [e.id for e in store.list("u1")] == [sample_plan.id]

    def test_retry_pending_without_queue(self):
        assert FeedbackProcessor(InMemoryHistoryStore()).retry_pending("u1") == 0
