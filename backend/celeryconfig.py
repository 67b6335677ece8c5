# backend/celeryconfig.py

import os
from kombu import Queue, Exchange

from backend.app.config import settings

# REDIS_URL points at the compose service; outside docker use redis://localhost:6379/0
broker_url = os.getenv("CELERY_BROKER_URL", settings.REDIS_URL)
result_backend = os.getenv("CELERY_RESULT_BACKEND", broker_url)
# Task results are only informational; the job row is the source of truth
result_expires = 3600

task_serializer = "json"
result_serializer = "json"
accept_content = ["json"]
timezone = "UTC"
enable_utc = True

# One analysis at a time per worker process; each holds an LLM call open
worker_prefetch_multiplier = 1
task_soft_time_limit = settings.CELERY_SOFT_TIME_LIMIT
task_time_limit = settings.CELERY_HARD_TIME_LIMIT

# -------- Queues & Routing --------
jobs_exchange = Exchange("jobs", type="direct")
llm_exchange = Exchange("llm", type="direct")

task_queues = (
    Queue("default", exchange=jobs_exchange, routing_key="default"),
    Queue("llm", exchange=llm_exchange, routing_key="llm"),
)

task_default_queue = "default"
task_default_exchange = "jobs"
task_default_routing_key = "default"

task_routes = {
    "process_analysis_job": {"queue": "llm", "routing_key": "llm"},
    "trigger_job_processing": {"queue": "default", "routing_key": "default"},
}

# -------- Periodic scheduler trigger (celery beat) --------
beat_schedule = {
    "trigger-job-processing": {
        "task": "trigger_job_processing",
        "schedule": settings.SCHEDULER_INTERVAL_SECONDS,
    },
}
