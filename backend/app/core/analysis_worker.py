# backend/app/core/analysis_worker.py

import logging
from typing import Dict, Any

from sqlalchemy.exc import SQLAlchemyError

from backend.app.core.errors import AppError, InvalidTransition
from backend.app.core.file_fetcher import ResumeFileFetcher
from backend.app.core.job_store import JobStore, ResumeStore
from backend.app.core.pdf_parser import ResumeTextExtractor
from backend.app.core.resume_analyzer import ResumeAnalyzer
from backend.app.models.job_models import JobStatus
from backend.app.models.records import AnalysisJob

logger = logging.getLogger(__name__)


class JobStepError(Exception):
    """A worker step failed; the message is what gets stored on the job."""


def describe(e: Exception) -> str:
    if isinstance(e, AppError) and e.details:
        return f"{e.message}: {e.details}"
    return str(e) or e.__class__.__name__


class AnalysisWorker:
    """
    Processes one analysis job end to end:
    claim -> load resume -> fetch file -> extract text -> LLM -> validate -> persist.

    There are no retries. Any failure ends the job as `failed` with the error
    message recorded on the row; nothing is raised to the caller.
    """

    def __init__(
        self,
        jobs: JobStore,
        resumes: ResumeStore,
        fetcher: ResumeFileFetcher,
        extractor: ResumeTextExtractor,
        analyzer: ResumeAnalyzer,
    ):
        self.jobs = jobs
        self.resumes = resumes
        self.fetcher = fetcher
        self.extractor = extractor
        self.analyzer = analyzer

    def process(self, job_id: str) -> Dict[str, Any]:
        logger.info("Starting job processing: %s", job_id)
        job = self.jobs.get(job_id)
        if job is None:
            logger.error("Job not found: %s", job_id)
            return self._outcome(job_id, False, "Job not found")

        status = JobStatus(job.status)
        if status.is_terminal:
            logger.warning("Job %s already %s; skipping", job_id, status.value)
            return self._outcome(job_id, False, f"Job already {status.value}")
        # The scheduler claims before dispatching; direct invocations claim here.
        if status == JobStatus.PENDING and not self.jobs.claim(job_id):
            logger.warning("Job %s was claimed by another worker", job_id)
            return self._outcome(job_id, False, "Job already claimed")

        try:
            result = self._run(job)
        except JobStepError as e:
            return self._fail(job_id, str(e))
        except Exception as e:
            logger.exception("Unexpected error in job processing %s", job_id)
            return self._fail(job_id, describe(e))

        try:
            self.jobs.complete(job_id, result)
        except InvalidTransition as e:
            logger.warning("Could not complete job %s: %s", job_id, e.details)
            return self._outcome(job_id, False, describe(e))
        logger.info("Job %s marked as completed", job_id)

        # job is already terminal here; upsert errors are logged, not recorded on the job
        try:
            self.resumes.save_latest_analysis(job.resume_id, job.user_id, job_id, result)
        except SQLAlchemyError as e:
            logger.error("Job %s: could not store latest analysis for resume %s: %s", job_id, job.resume_id, e)
        return self._outcome(job_id, True)

    def _run(self, job: AnalysisJob) -> Dict[str, Any]:
        resume = self.resumes.get(job.resume_id)
        if resume is None:
            raise JobStepError("Resume not found")
        logger.info("Job %s: resume %s, file %s", job.id, resume.id, resume.file_name)

        try:
            content = self.fetcher.fetch(resume.resume_url or "")
            text = self.extractor.extract(content, resume.file_type, resume.file_name)
        except (AppError, ValueError) as e:
            raise JobStepError(f"Error processing file: {describe(e)}") from e
        if not text.strip():
            raise JobStepError("Error processing file: no text could be extracted from resume")
        logger.info("Job %s: extracted %d characters", job.id, len(text))

        try:
            analysis = self.analyzer.analyze(text, job.job_role, job.industry, job.experience_level)
        except (AppError, ValueError) as e:
            raise JobStepError(f"Analysis error: {describe(e)}") from e
        return analysis.model_dump(mode="json")

    def _fail(self, job_id: str, message: str) -> Dict[str, Any]:
        try:
            self.jobs.fail(job_id, message)
            logger.info("Job %s marked as failed: %s", job_id, message)
        except InvalidTransition as e:
            logger.warning("Could not mark job %s failed: %s", job_id, e.details)
        return self._outcome(job_id, False, message)

    @staticmethod
    def _outcome(job_id: str, success: bool, error: str | None = None) -> Dict[str, Any]:
        return {"jobId": job_id, "success": success, "error": error}
