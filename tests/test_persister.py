"""Tests for project persistence: slug retry, failures, concurrency."""

import threading
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from contracts import PlanDocument
from persistence import (
    PersistFailure,
    ProjectPersister,
    RetryPolicy,
    SlugConflictError,
    SlugExhausted,
    StorageFailure,
    StoreError,
)

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def no_sleep(_seconds):
    pass


class TestCreate:
    """Test ProjectPersister.create against the SQLite store."""

    def test_first_and_second_slug(self, store, brief, plan):
        persister = ProjectPersister(store, RetryPolicy(sleep=no_sleep))
        first = persister.create(brief, plan, "alice")
        second = persister.create(brief, plan, "alice")
        assert first.slug == "ai-tool"
        assert second.slug == "ai-tool-1"

    def test_counters_start_at_zero(self, store, brief, plan):
        record = ProjectPersister(store, RetryPolicy(sleep=no_sleep)).create(brief, plan, "alice")
        assert record.view_count == 0
        assert record.fork_count == 0

    def test_adjusted_timeline_supersedes_brief(self, store, brief, plan):
        # brief asks for 4 weeks, the plan adjusts to 9.5
        record = ProjectPersister(store, RetryPolicy(sleep=no_sleep)).create(brief, plan, "alice")
        assert record.timeline_weeks == 10

    def test_oversized_timeline_left_empty(self, store, brief, plan_payload):
        plan_payload["roadmap"]["adjustedTimelineWeeks"] = 1e300
        huge = PlanDocument.model_validate(plan_payload)
        record = ProjectPersister(store, RetryPolicy(sleep=no_sleep)).create(brief, huge, "alice")
        assert record.timeline_weeks is None
        assert record.plan.roadmap.adjusted_timeline_weeks == 1e300

    def test_unbindable_value_is_storage_failure(self, store, brief, plan):
        persister = ProjectPersister(store, RetryPolicy(sleep=no_sleep))
        draft = persister.build_draft(brief, plan, "alice").model_copy(update={"timeline_weeks": 10**30})
        with pytest.raises(StoreError):
            store.insert("ai-tool", draft)

        with patch.object(persister, "build_draft", return_value=draft):
            with pytest.raises(StorageFailure):
                persister.create(brief, plan, "alice")

    def test_guest_projects_expire(self, store, brief, plan):
        persister = ProjectPersister(store, RetryPolicy(sleep=no_sleep), guest_ttl_hours=24, clock=lambda: NOW)
        draft = persister.build_draft(brief, plan, owner_id=None)
        assert draft.expires_at == NOW + timedelta(hours=24)
        assert persister.create(brief, plan, None).is_guest

    def test_owned_projects_never_expire(self, store, brief, plan):
        persister = ProjectPersister(store, RetryPolicy(sleep=no_sleep), clock=lambda: NOW)
        assert persister.create(brief, plan, "alice").expires_at is None

    def test_plan_stored_intact(self, store, brief, plan):
        record = ProjectPersister(store, RetryPolicy(sleep=no_sleep)).create(brief, plan, "alice")
        assert record.plan == plan
        assert record.is_public is True


class TestRetry:
    """Test the bounded slug-collision retry."""

    def test_conflict_then_success(self, brief, plan):
        store = MagicMock()
        store.slug_exists.return_value = False
        stored = MagicMock(slug="ai-tool-1")
        store.insert.side_effect = [SlugConflictError("taken"), stored]
        sleeps = []
        persister = ProjectPersister(store, RetryPolicy(max_attempts=3, base_delay=0.1, sleep=sleeps.append))

        assert persister.create(brief, plan, "alice") is stored
        assert store.insert.call_count == 2
        assert sleeps == [pytest.approx(0.1)]

    def test_exhaustion(self, brief, plan):
        store = MagicMock()
        store.slug_exists.return_value = False
        store.insert.side_effect = SlugConflictError("taken")
        sleeps = []
        persister = ProjectPersister(store, RetryPolicy(max_attempts=3, base_delay=0.1, sleep=sleeps.append))

        with pytest.raises(SlugExhausted) as exc_info:
            persister.create(brief, plan, "alice")
        assert exc_info.value.attempts == 3
        assert store.insert.call_count == 3
        assert sleeps == [pytest.approx(0.1), pytest.approx(0.2)]
        assert isinstance(exc_info.value, PersistFailure)

    def test_each_attempt_reallocates(self, brief, plan):
        store = MagicMock()
        store.slug_exists.side_effect = [False, True, False]
        store.insert.side_effect = [SlugConflictError("taken"), MagicMock()]
        ProjectPersister(store, RetryPolicy(sleep=no_sleep)).create(brief, plan, "alice")
        slugs = [c.args[0] for c in store.insert.call_args_list]
        assert slugs == ["ai-tool", "ai-tool-1"]

    def test_storage_failure_not_retried(self, brief, plan):
        store = MagicMock()
        store.slug_exists.return_value = False
        store.insert.side_effect = StoreError("disk full")
        sleeps = []
        persister = ProjectPersister(store, RetryPolicy(sleep=sleeps.append))

        with pytest.raises(StorageFailure) as exc_info:
            persister.create(brief, plan, "alice")
        assert store.insert.call_count == 1
        assert sleeps == []
        assert isinstance(exc_info.value.__cause__, StoreError)

    def test_probe_failure_is_storage_failure(self, brief, plan):
        store = MagicMock()
        store.slug_exists.side_effect = StoreError("connection lost")
        with pytest.raises(StorageFailure):
            ProjectPersister(store, RetryPolicy(sleep=no_sleep)).create(brief, plan, "alice")
        store.insert.assert_not_called()

    def test_policy_requires_an_attempt(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)


class TestConcurrency:
    """Simultaneous creations with the same title."""

    def test_distinct_slugs_from_one_base(self, memory_store, brief, plan):
        workers = 8
        persister = ProjectPersister(
            memory_store,
            RetryPolicy(max_attempts=workers, base_delay=0.001),
        )
        start = threading.Barrier(workers)
        results, errors = [], []

        def create():
            start.wait()
            try:
                results.append(persister.create(brief, plan, "alice"))
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=create) for _ in range(workers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        slugs = {r.slug for r in results}
        assert len(slugs) == workers
        assert all(s == "ai-tool" or s.startswith("ai-tool-") for s in slugs)
