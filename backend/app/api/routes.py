#backend/app/api/routes.py

import logging
from typing import Optional, Dict, Any, List
from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import FileResponse

from backend.app.api.dependencies import get_clients, get_current_user_id, get_dispatcher
from backend.app.core.analysis_jobs import create_analysis_job, read_job_status, require_owned_resume
from backend.app.core.artifacts import MarkdownReport, PDFRenderer
from backend.app.core.auth import secret_matches
from backend.app.core.clients import ServiceClients
from backend.app.core.errors import BadRequest, Conflict, NotFound, Unauthorized, UpstreamFailure
from backend.app.core.pdf_parser import TextExtractionError
from backend.app.core.scheduler import JobDispatcher, JobScheduler
from backend.app.models.job_models import (
    CreateAnalysisJobRequest,
    JobStatus,
    JobStatusResponse,
    JobSubmitResponse,
    ParseResumeRequest,
    ParseResumeResponse,
    ResumeAnalysisResponse,
    ResumeCreateRequest,
    ResumeResponse,
    TriggerResponse,
)

import tempfile
import os
import json

logger = logging.getLogger(__name__)

api_router = APIRouter()
_pdf = PDFRenderer()
_md = MarkdownReport()

@api_router.get("/health", tags=["Health"])
def health_check():
    return {"status": "ok"}

# ---------------- Resumes ----------------

@api_router.post("/api/resumes", response_model=ResumeResponse, tags=["Resumes"])
def register_resume(
    request: ResumeCreateRequest,
    user_id: str = Depends(get_current_user_id),
    clients: ServiceClients = Depends(get_clients),
):
    """Register an uploaded resume file for the caller."""
    resume = clients.resumes.create(user_id, request.file_name, request.file_type, request.resume_url)
    logger.info("Resume %s registered for user %s...", resume.id, user_id[:8])
    return ResumeResponse.model_validate(resume, from_attributes=True)

@api_router.get("/api/resumes", response_model=List[ResumeResponse], tags=["Resumes"])
def list_resumes(
    user_id: str = Depends(get_current_user_id),
    clients: ServiceClients = Depends(get_clients),
):
    return [ResumeResponse.model_validate(r, from_attributes=True) for r in clients.resumes.list_for_user(user_id)]

@api_router.get("/api/resumes/{resume_id}/analysis", response_model=ResumeAnalysisResponse, tags=["Resumes"])
def get_resume_analysis(
    resume_id: str,
    user_id: str = Depends(get_current_user_id),
    clients: ServiceClients = Depends(get_clients),
):
    """Most recent completed analysis of one of the caller's resumes."""
    require_owned_resume(clients.resumes, resume_id, user_id)
    analysis = clients.resumes.latest_analysis(resume_id)
    if analysis is None:
        raise NotFound("No analysis found for this resume")
    return ResumeAnalysisResponse.model_validate(analysis, from_attributes=True)

# ---------------- Parsing ----------------

@api_router.post("/api/parse-resume-pdf", response_model=ParseResumeResponse, tags=["Parsing"])
def parse_resume_pdf(
    request: ParseResumeRequest,
    authorization: Optional[str] = Header(None),
    x_internal_secret: Optional[str] = Header(None),
    clients: ServiceClients = Depends(get_clients),
):
    """
    Extract text from a resume PDF.
    Trusted internal callers present X-Internal-Secret; everyone else must own the resume.
    """
    if secret_matches(x_internal_secret, clients.settings.INTERNAL_PARSE_SECRET):
        resume = clients.resumes.get(request.resume_id)
        if resume is None:
            raise NotFound("Resume not found")
    else:
        user_id = clients.verifier.user_id_from_header(authorization)
        resume = require_owned_resume(clients.resumes, request.resume_id, user_id)

    if not clients.extractor.is_pdf(resume.file_type):
        raise BadRequest("Unsupported file type", details="Currently only PDF files are supported")

    content = clients.fetcher.fetch(request.resume_url)
    try:
        text = clients.extractor.extract(content, resume.file_type, resume.file_name)
    except TextExtractionError as e:
        raise UpstreamFailure("Failed to parse PDF", details=str(e)) from e
    if not text:
        logger.warning("No text extracted from resume %s; it may be an image-based PDF", resume.id)

    return ParseResumeResponse(
        resume_id=resume.id,
        file_name=resume.file_name,
        file_type=resume.file_type,
        text_length=len(text),
        text=text,
    )

# ---------------- Analysis jobs ----------------

@api_router.post("/api/create-analysis-job", response_model=JobSubmitResponse, tags=["Jobs"])
def create_job(
    request: CreateAnalysisJobRequest,
    user_id: str = Depends(get_current_user_id),
    clients: ServiceClients = Depends(get_clients),
):
    """Queue a resume analysis job. It is picked up by the next scheduler trigger."""
    return create_analysis_job(clients.jobs, clients.resumes, user_id, request)

@api_router.get(
    "/api/get-analysis-status",
    response_model=JobStatusResponse,
    response_model_exclude_none=True,
    tags=["Jobs"],
)
def get_analysis_status(
    job_id: Optional[str] = Query(default=None, alias="jobId"),
    user_id: str = Depends(get_current_user_id),
    clients: ServiceClients = Depends(get_clients),
):
    return read_job_status(clients.jobs, user_id, job_id)

@api_router.post("/api/trigger-job-processing", response_model=TriggerResponse, tags=["Jobs"])
def trigger_job_processing(
    x_api_key: Optional[str] = Header(None),
    clients: ServiceClients = Depends(get_clients),
    dispatcher: JobDispatcher = Depends(get_dispatcher),
):
    """Dispatch up to 5 pending jobs, oldest first. Protected by a static API key."""
    if not secret_matches(x_api_key, clients.settings.JOB_TRIGGER_API_KEY):
        raise Unauthorized("Unauthorized: Invalid API key")
    scheduler = JobScheduler(clients.jobs, dispatcher, batch_size=clients.settings.batch_size())
    results = scheduler.trigger()
    if not results:
        return TriggerResponse(message="No pending jobs found", results=[])
    return TriggerResponse(message=f"Processed {len(results)} jobs", results=results)

# ---------------- Downloadable Artifacts ----------------

@api_router.get("/api/analysis-report/{job_id}", tags=["Jobs"])
def analysis_report(
    job_id: str,
    format: str = Query("md", pattern="^(md|json|pdf)$", description="Download format: md, json, or pdf"),
    user_id: str = Depends(get_current_user_id),
    clients: ServiceClients = Depends(get_clients),
):
    """
    Download a finished job's result as Markdown (md), JSON (json), or PDF (pdf).
    """
    job = clients.jobs.get_for_owner(job_id, user_id)
    if job is None:
        raise NotFound("Job not found", details="Job not found or not owned by user")
    status = JobStatus(job.status)
    if not status.is_terminal:
        raise Conflict(f"Job not finished yet (status={status.value})")
    if status == JobStatus.FAILED:
        err = job.error_message or "Unknown error"
        if format == "json":
            return _download_json({"jobId": job_id, "status": status.value, "error": err}, f"analysis_{job_id}_error.json")
        raise Conflict("Job failed", details=err)

    result = job.result or {}
    meta = {"job_role": job.job_role, "industry": job.industry, "experience_level": job.experience_level}
    if format == "json":
        return _download_json({"jobId": job_id, "status": status.value, "result": result}, f"resume_analysis_{job_id}.json")
    if format == "pdf":
        tmp_path = _tmp_path(f"resume_analysis_{job_id}.pdf")
        _pdf.build_analysis_pdf(tmp_path, result, meta)
        return FileResponse(tmp_path, media_type="application/pdf", filename=os.path.basename(tmp_path))
    return _download_md(_md.render(result, meta), f"resume_analysis_{job_id}.md")

# ---------------- Helpers: File responses ----------------

def _download_md(markdown_text: str, filename: str) -> FileResponse:
    tmp_path = _write_temp_file(markdown_text, filename)
    return FileResponse(tmp_path, media_type="text/markdown", filename=os.path.basename(tmp_path))

def _download_json(payload: Dict[str, Any], filename: str) -> FileResponse:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    tmp_path = _write_temp_file(text, filename)
    return FileResponse(tmp_path, media_type="application/json", filename=os.path.basename(tmp_path))

def _write_temp_file(content: str, filename: str) -> str:
    tmp_path = _tmp_path(filename)
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(content)
    return tmp_path

def _tmp_path(filename: str) -> str:
    tmp_dir = tempfile.mkdtemp(prefix="artifacts_")
    return os.path.join(tmp_dir, filename)
