# backend/app/core/job_store.py

from typing import Optional, List, Dict, Any, Iterable

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlmodel import select, col

from backend.app.core.database import session_scope
from backend.app.core.errors import InvalidTransition
from backend.app.models.job_models import JobStatus
from backend.app.models.records import AnalysisJob, Resume, ResumeAnalysis, utcnow


class ResumeStore:
    """Resume metadata rows."""

    def __init__(self, engine: Engine):
        self.engine = engine

    def create(self, user_id: str, file_name: str, file_type: str, resume_url: Optional[str]) -> Resume:
        resume = Resume(user_id=user_id, file_name=file_name, file_type=file_type, resume_url=resume_url)
        with session_scope(self.engine) as session:
            session.add(resume)
            session.commit()
            session.refresh(resume)
        return resume

    def get(self, resume_id: str) -> Optional[Resume]:
        with session_scope(self.engine) as session:
            return session.get(Resume, resume_id)

    def list_for_user(self, user_id: str) -> List[Resume]:
        with session_scope(self.engine) as session:
            stmt = (
                select(Resume)
                .where(Resume.user_id == user_id)
                .order_by(col(Resume.created_at).desc())
            )
            return list(session.exec(stmt).all())

    def save_latest_analysis(self, resume_id: str, user_id: str, job_id: str, result: Dict[str, Any]) -> ResumeAnalysis:
        """Insert or overwrite the one analysis kept per resume."""
        with session_scope(self.engine) as session:
            row = session.exec(select(ResumeAnalysis).where(ResumeAnalysis.resume_id == resume_id)).first()
            if row is None:
                row = ResumeAnalysis(resume_id=resume_id, user_id=user_id, job_id=job_id, analysis_result=result)
            else:
                row.user_id = user_id
                row.job_id = job_id
                row.analysis_result = result
                row.updated_at = utcnow()
            session.add(row)
            session.commit()
            session.refresh(row)
        return row

    def latest_analysis(self, resume_id: str) -> Optional[ResumeAnalysis]:
        with session_scope(self.engine) as session:
            return session.exec(select(ResumeAnalysis).where(ResumeAnalysis.resume_id == resume_id)).first()


class JobStore:
    """
    Analysis job rows.

    Every status change is a conditional UPDATE guarded on the current status,
    so two writers can never both move the same job out of the same state.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def create(
        self,
        resume_id: str,
        user_id: str,
        job_role: Optional[str] = None,
        industry: Optional[str] = None,
        experience_level: Optional[str] = None,
    ) -> AnalysisJob:
        now = utcnow()
        job = AnalysisJob(
            resume_id=resume_id,
            user_id=user_id,
            status=JobStatus.PENDING.value,
            job_role=job_role,
            industry=industry,
            experience_level=experience_level,
            created_at=now,
            updated_at=now,
        )
        with session_scope(self.engine) as session:
            session.add(job)
            session.commit()
            session.refresh(job)
        return job

    def get(self, job_id: str) -> Optional[AnalysisJob]:
        with session_scope(self.engine) as session:
            return session.get(AnalysisJob, job_id)

    def get_for_owner(self, job_id: str, user_id: str) -> Optional[AnalysisJob]:
        """Owner-scoped lookup: a job owned by someone else looks exactly like a missing one."""
        with session_scope(self.engine) as session:
            stmt = select(AnalysisJob).where(AnalysisJob.id == job_id, AnalysisJob.user_id == user_id)
            return session.exec(stmt).first()

    def list_pending(self, limit: int) -> List[AnalysisJob]:
        with session_scope(self.engine) as session:
            stmt = (
                select(AnalysisJob)
                .where(AnalysisJob.status == JobStatus.PENDING.value)
                .order_by(col(AnalysisJob.created_at).asc(), col(AnalysisJob.id).asc())
                .limit(limit)
            )
            return list(session.exec(stmt).all())

    # ---------- Transitions ----------
    def claim(self, job_id: str) -> bool:
        """pending -> processing. False if someone else got there first."""
        return self._transition(job_id, (JobStatus.PENDING,), status=JobStatus.PROCESSING.value)

    def complete(self, job_id: str, result: Dict[str, Any]) -> None:
        now = utcnow()
        ok = self._transition(
            job_id,
            (JobStatus.PROCESSING,),
            status=JobStatus.COMPLETED.value,
            result=result,
            completed_at=now,
            updated_at=now,
        )
        if not ok:
            raise InvalidTransition(details=f"Job {job_id} is not processing; cannot complete")

    def fail(self, job_id: str, error_message: str) -> None:
        """processing -> failed. A pending job has to be claimed before it can fail."""
        ok = self._transition(
            job_id,
            (JobStatus.PROCESSING,),
            status=JobStatus.FAILED.value,
            error_message=error_message,
        )
        if not ok:
            raise InvalidTransition(details=f"Job {job_id} is not processing; cannot fail")

    def _transition(self, job_id: str, from_statuses: Iterable[JobStatus], **values: Any) -> bool:
        values.setdefault("updated_at", utcnow())
        stmt = (
            update(AnalysisJob)
            .where(col(AnalysisJob.id) == job_id)
            .where(col(AnalysisJob.status).in_([s.value for s in from_statuses]))
            .values(**values)
        )
        with self.engine.begin() as conn:
            return conn.execute(stmt).rowcount == 1
