# backend/app/models/interview_models.py

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from backend.app.models.job_models import CamelModel


class GenerateInterviewRequest(CamelModel):
    company: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    job_description: Optional[str] = None
    question_count: int = Field(..., ge=1, le=30)
    type: Literal["technical", "behavioral", "mixed"]


class GeneratedInterviewResponse(BaseModel):
    id: str
    user_id: str
    company: str
    role: str
    job_description: Optional[str] = None
    question_count: int
    interview_type: str
    questions: List[Dict[str, Any]]
    status: str
    created_at: datetime


# Session and analysis bodies use snake_case keys on the wire.
class InterviewSessionRequest(BaseModel):
    interview_id: str = Field(..., min_length=1)
    status: Literal["in_progress", "completed"]
    transcript: Union[str, List[Any]]


class InterviewSessionOut(BaseModel):
    id: str
    interview_id: str
    status: str
    transcript: List[Dict[str, Any]]
    created_at: datetime
    completed_at: Optional[datetime] = None


class InterviewSessionResponse(BaseModel):
    session: InterviewSessionOut


class AnalyzeInterviewRequest(BaseModel):
    session_id: str = Field(..., min_length=1)


class InterviewAnalysisResponse(BaseModel):
    id: str
    session_id: str
    overall_score: int
    technical_score: Optional[int] = None
    behavioral_score: Optional[int] = None
    communication_score: int
    confidence_score: int
    analysis_summary: str
    strengths: List[str]
    areas_for_improvement: List[str]
    detailed_feedback: Dict[str, Any]
    created_at: datetime
