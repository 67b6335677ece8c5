"""
Tests for the scheduler trigger: batch selection, the claim step and
dispatch failure handling.

Run tests with: pytest backend/tests/test_scheduler.py -v
"""

from unittest.mock import patch

import pytest

from backend.app.core.scheduler import JobScheduler, MAX_BATCH_SIZE
from conftest import FakeDispatcher, age_job


@pytest.fixture
def store(clients):
    return clients.jobs


def _queue_jobs(store, clients, resume, count):
    """Create `count` pending jobs, oldest first."""
    ids = []
    for i in range(count):
        job = store.create(resume.id, "user-1")
        age_job(clients.engine, job.id, minutes=100 - i)
        ids.append(job.id)
    return ids


class TestTrigger:

    def test_no_pending_jobs(self, store, dispatcher):
        assert JobScheduler(store, dispatcher).trigger() == []
        assert dispatcher.dispatched == []

    def test_dispatches_at_most_five_oldest_jobs(self, store, clients, resume, dispatcher):
        ids = _queue_jobs(store, clients, resume, 7)

        results = JobScheduler(store, dispatcher).trigger()

        assert [r.job_id for r in results] == ids[:5]
        assert all(r.success for r in results)
        assert dispatcher.dispatched == ids[:5]
        assert [store.get(i).status for i in ids] == ["processing"] * 5 + ["pending"] * 2

    def test_next_trigger_picks_up_the_rest(self, store, clients, resume, dispatcher):
        ids = _queue_jobs(store, clients, resume, 7)
        scheduler = JobScheduler(store, dispatcher)

        scheduler.trigger()
        second = scheduler.trigger()

        assert [r.job_id for r in second] == ids[5:]

    def test_outcome_carries_task_id(self, store, resume, dispatcher):
        job = store.create(resume.id, "user-1")
        [outcome] = JobScheduler(store, dispatcher).trigger()
        assert outcome.task_id == f"task-{job.id}"
        assert outcome.error is None

    def test_batch_size_is_capped(self, store, dispatcher):
        assert JobScheduler(store, dispatcher, batch_size=50).batch_size == MAX_BATCH_SIZE
        assert JobScheduler(store, dispatcher, batch_size=0).batch_size == 1


class TestClaimAndDispatchFailures:

    def test_job_claimed_elsewhere_is_not_dispatched(self, store, resume, dispatcher):
        a = store.create(resume.id, "user-1")
        b = store.create(resume.id, "user-1")
        stale = store.list_pending(5)
        # A concurrent trigger claims `a` between our listing and our claim
        store.claim(a.id)

        with patch.object(store, "list_pending", return_value=stale):
            results = {r.job_id: r for r in JobScheduler(store, dispatcher).trigger()}

        assert results[a.id].success is False
        assert results[a.id].error == "Job already claimed"
        assert results[b.id].success is True
        assert dispatcher.dispatched == [b.id]

    def test_dispatch_error_fails_the_job_and_continues(self, store, clients, resume):
        ids = _queue_jobs(store, clients, resume, 3)
        dispatcher = FakeDispatcher(fail_for={ids[1]})

        results = JobScheduler(store, dispatcher).trigger()

        assert [r.success for r in results] == [True, False, True]
        assert results[1].error == "Failed to dispatch job: broker unavailable"
        broken = store.get(ids[1])
        assert broken.status == "failed"
        assert broken.error_message == "Failed to dispatch job: broker unavailable"
        assert dispatcher.dispatched == [ids[0], ids[2]]
