# backend/app/models/records.py

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from uuid import uuid4

from sqlalchemy import Column, DateTime, JSON
from sqlalchemy.types import TypeDecorator
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware UTC timestamps on every backend.
    SQLite drops the offset on write, so values read back are re-tagged as UTC.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def timestamp_column(nullable: bool = False, index: bool = False) -> Column:
    return Column(UTCDateTime(), nullable=nullable, index=index)


def new_id() -> str:
    return str(uuid4())


class Resume(SQLModel, table=True):
    """An uploaded resume file and who owns it."""
    __tablename__ = "resumes"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    file_name: str
    # declared MIME type, e.g. application/pdf
    file_type: str
    resume_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())


class AnalysisJob(SQLModel, table=True):
    """
    One asynchronous resume analysis request.

    status moves pending -> processing -> completed|failed and never back.
    result and error_message are written once, at the terminal transition.
    """
    __tablename__ = "analysis_jobs"

    id: str = Field(default_factory=new_id, primary_key=True)
    resume_id: str = Field(index=True)
    user_id: str = Field(index=True)
    status: str = Field(default="pending", index=True)

    job_role: Optional[str] = None
    industry: Optional[str] = None
    experience_level: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column(index=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
    completed_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))

    result: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    error_message: Optional[str] = None


class ResumeAnalysis(SQLModel, table=True):
    """Latest completed analysis per resume; each new completion overwrites it."""
    __tablename__ = "resume_analyses"

    id: str = Field(default_factory=new_id, primary_key=True)
    resume_id: str = Field(index=True, unique=True)
    user_id: str = Field(index=True)
    job_id: str
    analysis_result: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
    updated_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())


class GeneratedInterview(SQLModel, table=True):
    __tablename__ = "generated_interviews"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    company: str
    role: str
    job_description: Optional[str] = None
    question_count: int
    interview_type: str
    questions: List[Dict[str, Any]] = Field(sa_column=Column(JSON))
    # generated | analyzed
    status: str = Field(default="generated")
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())


class InterviewSession(SQLModel, table=True):
    __tablename__ = "interview_sessions"

    id: str = Field(default_factory=new_id, primary_key=True)
    interview_id: str = Field(index=True)
    user_id: str = Field(index=True)
    # in_progress | completed
    status: str
    transcript: List[Dict[str, Any]] = Field(sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
    completed_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))


class InterviewAnalysisRecord(SQLModel, table=True):
    __tablename__ = "interview_analyses"

    id: str = Field(default_factory=new_id, primary_key=True)
    session_id: str = Field(index=True, unique=True)
    overall_score: int
    technical_score: Optional[int] = None
    behavioral_score: Optional[int] = None
    communication_score: int
    confidence_score: int
    analysis_summary: str
    strengths: List[str] = Field(sa_column=Column(JSON))
    areas_for_improvement: List[str] = Field(sa_column=Column(JSON))
    detailed_feedback: Dict[str, Any] = Field(sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())


class NetworkingMessage(SQLModel, table=True):
    __tablename__ = "networking_messages"

    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(index=True)
    company_name: str
    role: str
    contact_name: Optional[str] = None
    contact_role: Optional[str] = None
    message_type: str
    subject: Optional[str] = None
    message: str
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
