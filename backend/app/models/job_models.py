
#backend/app/models/job_models.py

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, Dict, Any, List
from enum import Enum

class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)

class CamelModel(BaseModel):
    """JSON bodies use camelCase keys; Python code uses snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# ---------- Resumes ----------
class ResumeCreateRequest(CamelModel):
    file_name: str = Field(..., min_length=1)
    file_type: str = Field(..., min_length=1, description="Declared MIME type")
    resume_url: str = Field(..., min_length=1)

class ResumeResponse(CamelModel):
    id: str
    file_name: str
    file_type: str
    resume_url: Optional[str] = None
    created_at: datetime

class ResumeAnalysisResponse(CamelModel):
    resume_id: str
    job_id: str
    analysis_result: Dict[str, Any]
    updated_at: datetime

# ---------- Parsing ----------
class ParseResumeRequest(CamelModel):
    resume_id: str = Field(..., min_length=1)
    resume_url: str = Field(..., min_length=1)

class ParseResumeResponse(CamelModel):
    success: bool = True
    resume_id: str
    file_name: str
    file_type: str
    text_length: int
    text: str

# ---------- Jobs ----------
class CreateAnalysisJobRequest(CamelModel):
    resume_id: Optional[str] = Field(default=None, description="Resume to analyze")
    job_role: Optional[str] = None
    industry: Optional[str] = None
    experience_level: Optional[str] = None

class JobSubmitResponse(CamelModel):
    job_id: str
    status: JobStatus
    message: str = "Analysis job created successfully"

class JobStatusResponse(CamelModel):
    job_id: str
    status: JobStatus
    resume_id: str
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    result: Optional[Dict[str, Any]] = None
    processing_time_ms: Optional[int] = None
    processing_time_sec: Optional[int] = None
    error: Optional[str] = None

class DispatchOutcome(CamelModel):
    job_id: str
    success: bool
    task_id: Optional[str] = None
    error: Optional[str] = None

class TriggerResponse(CamelModel):
    success: bool = True
    message: str
    results: List[DispatchOutcome] = []
