# backend/app/core/scheduler.py

import logging
from typing import List, Protocol

from backend.app.core.errors import InvalidTransition
from backend.app.core.job_store import JobStore
from backend.app.models.job_models import DispatchOutcome

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 5


class JobDispatcher(Protocol):
    def dispatch(self, job_id: str) -> str: ...


class JobScheduler:
    """
    Lists pending jobs oldest-first, claims each one and hands it to the worker.

    It does no analysis work itself and never retries. A job that another
    trigger already claimed is reported and skipped. A claimed job whose
    dispatch fails is closed out as failed, since nothing else would ever pick
    it up again.
    """

    def __init__(self, jobs: JobStore, dispatcher: JobDispatcher, batch_size: int = MAX_BATCH_SIZE):
        self.jobs = jobs
        self.dispatcher = dispatcher
        self.batch_size = max(1, min(batch_size, MAX_BATCH_SIZE))

    def trigger(self) -> List[DispatchOutcome]:
        pending = self.jobs.list_pending(self.batch_size)
        logger.info("Scheduler: found %d pending jobs", len(pending))

        results: List[DispatchOutcome] = []
        for job in pending:
            if not self.jobs.claim(job.id):
                logger.info("Scheduler: job %s already claimed", job.id)
                results.append(DispatchOutcome(job_id=job.id, success=False, error="Job already claimed"))
                continue
            try:
                task_id = self.dispatcher.dispatch(job.id)
            except Exception as e:
                # broker/connection errors come from kombu, redis, etc.
                message = f"Failed to dispatch job: {e}"
                logger.error("Scheduler: %s (job %s)", message, job.id)
                self._close_out(job.id, message)
                results.append(DispatchOutcome(job_id=job.id, success=False, error=message))
                continue
            logger.info("Scheduler: job %s dispatched as task %s", job.id, task_id)
            results.append(DispatchOutcome(job_id=job.id, success=True, task_id=task_id))
        return results

    def _close_out(self, job_id: str, message: str) -> None:
        try:
            self.jobs.fail(job_id, message)
        except InvalidTransition as e:
            logger.warning("Scheduler: could not fail job %s: %s", job_id, e.details)
