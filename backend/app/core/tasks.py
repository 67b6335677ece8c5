# backend/app/core/tasks.py

from celery.utils.log import get_task_logger
from backend.worker.worker import celery_app, get_worker_clients
from backend.app.config import settings
from backend.app.core.scheduler import JobScheduler

logger = get_task_logger(__name__)

@celery_app.task(
    name="process_analysis_job",
    bind=False,
    # No autoretry: a failed analysis is terminal and recorded on the job row.
    soft_time_limit=settings.CELERY_SOFT_TIME_LIMIT,  #  600s
    time_limit=settings.CELERY_HARD_TIME_LIMIT,       #  660s
    acks_late=False,
)
def process_analysis_job(job_id: str):
    logger.info("Starting analysis job id=%s", job_id)
    outcome = get_worker_clients().analysis_worker().process(job_id)
    logger.info("Finished analysis job id=%s success=%s", job_id, outcome["success"])
    return outcome


@celery_app.task(
    name="trigger_job_processing",
    bind=False,
    soft_time_limit=60,
    time_limit=90,
)
def trigger_job_processing():
    """
    Periodic entry point (Celery beat) for the scheduler; same work as the
    /api/trigger-job-processing endpoint.
    """
    from backend.app.core.async_queue import AsyncJobQueueCelery

    clients = get_worker_clients()
    scheduler = JobScheduler(clients.jobs, AsyncJobQueueCelery(), batch_size=settings.batch_size())
    results = scheduler.trigger()
    logger.info("Scheduler dispatched %d jobs", sum(1 for r in results if r.success))
    return [r.model_dump(by_alias=True) for r in results]
