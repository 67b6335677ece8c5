# backend/app/core/async_queue.py

from backend.worker.worker import celery_app

class AsyncJobQueueCelery:
    """Dispatches analysis jobs to the Celery worker with queue routing."""

    def _pick_queue(self, task_name: str) -> str:
        """
        Decide which queue to use based on the task.
        - LLM-heavy tasks → 'llm'
        - everything else → 'default'
        """
        if task_name in {"process_analysis_job"}:
            return "llm"
        return "default"

    def dispatch(self, job_id: str) -> str:
        """Enqueue the worker for one claimed job; returns the Celery task id."""
        queue_name = self._pick_queue("process_analysis_job")
        # Route to the selected queue via send_task; use positional args
        async_result = celery_app.send_task(
            "process_analysis_job",
            args=[job_id],
            queue=queue_name,
            routing_key=queue_name,
        )
        return async_result.id
