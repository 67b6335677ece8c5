# backend/app/core/analysis_jobs.py

import logging
from typing import Optional

from backend.app.core.errors import BadRequest, Forbidden, NotFound
from backend.app.core.job_store import JobStore, ResumeStore
from backend.app.models.job_models import (
    CreateAnalysisJobRequest,
    JobStatus,
    JobStatusResponse,
    JobSubmitResponse,
)
from backend.app.models.records import Resume, utcnow

logger = logging.getLogger(__name__)

UNKNOWN_FAILURE = "Unknown error occurred during analysis"


def require_owned_resume(resumes: ResumeStore, resume_id: str, user_id: str) -> Resume:
    resume = resumes.get(resume_id)
    if resume is None:
        logger.warning("Resume not found: %s", resume_id)
        raise NotFound("Resume not found")
    if resume.user_id != user_id:
        logger.warning("Resume %s belongs to a different user (requested by %s...)", resume_id, user_id[:8])
        raise Forbidden("Not authorized to access this resume")
    return resume


def create_analysis_job(
    jobs: JobStore,
    resumes: ResumeStore,
    user_id: str,
    request: CreateAnalysisJobRequest,
) -> JobSubmitResponse:
    """Verify the caller owns the resume, then queue a pending job."""
    if not request.resume_id:
        raise BadRequest("Resume ID is required")
    require_owned_resume(resumes, request.resume_id, user_id)

    job = jobs.create(
        resume_id=request.resume_id,
        user_id=user_id,
        job_role=request.job_role,
        industry=request.industry,
        experience_level=request.experience_level,
    )
    logger.info("Job created with ID %s for resume %s", job.id, request.resume_id)
    return JobSubmitResponse(job_id=job.id, status=JobStatus.PENDING)


def read_job_status(jobs: JobStore, user_id: str, job_id: Optional[str]) -> JobStatusResponse:
    """
    Owner-only poll. Missing and not-owned jobs produce the same NotFound.
    """
    if not job_id:
        raise BadRequest("Job ID is required")
    job = jobs.get_for_owner(job_id, user_id)
    if job is None:
        raise NotFound("Job not found", details="Job not found or not owned by user")

    status = JobStatus(job.status)
    response = JobStatusResponse(
        job_id=job.id,
        status=status,
        resume_id=job.resume_id,
        created_at=job.created_at,
        updated_at=job.updated_at,
    )
    if status == JobStatus.COMPLETED:
        response.completed_at = job.completed_at
        response.result = job.result
    elif status == JobStatus.PROCESSING:
        elapsed_ms = max(0, int((utcnow() - job.updated_at).total_seconds() * 1000))
        response.processing_time_ms = elapsed_ms
        response.processing_time_sec = round(elapsed_ms / 1000)
    elif status == JobStatus.FAILED:
        response.error = job.error_message or UNKNOWN_FAILURE
    return response
