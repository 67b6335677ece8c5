# backend/worker/worker.py

from typing import Optional

from celery import Celery
from celery.signals import worker_process_init, worker_process_shutdown
from celery.utils.log import get_task_logger
from backend.app.config import settings
from backend.app.core.clients import ServiceClients

logger = get_task_logger(__name__)

# Create Celery app
celery_app = Celery("finprep")
celery_app.config_from_object("backend.celeryconfig")

# Clients live for the lifetime of one worker process
_clients: Optional[ServiceClients] = None


def get_worker_clients() -> ServiceClients:
    global _clients
    if _clients is None:
        _clients = ServiceClients.build(settings)
    return _clients


@worker_process_init.connect
def _init_clients(**kwargs):
    get_worker_clients()
    logger.info("Worker clients ready (model=%s)", settings.full_model_id())


@worker_process_shutdown.connect
def _close_clients(**kwargs):
    global _clients
    if _clients is not None:
        _clients.close()
        _clients = None


# Ensure tasks are imported on worker start
import backend.app.core.tasks       # noqa: F401,E402
