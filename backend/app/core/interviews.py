# backend/app/core/interviews.py

import json
import logging
from typing import Any, Dict, List, Union

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from backend.app.core.ai_validation import parse_ai_model, parse_ai_value
from backend.app.core.database import session_scope
from backend.app.core.errors import AIResponseValidationError, BadRequest, Conflict, NotFound
from backend.app.core.llm_client import LLMClient
from backend.app.core.prompts import (
    JSON_ONLY_SYSTEM,
    interview_analysis_prompt,
    interview_questions_prompt,
)
from backend.app.models.ai_schemas import InterviewAnalysis
from backend.app.models.interview_models import (
    GenerateInterviewRequest,
    InterviewSessionRequest,
)
from backend.app.models.records import (
    GeneratedInterview,
    InterviewAnalysisRecord,
    InterviewSession,
    utcnow,
)

logger = logging.getLogger(__name__)

TRANSCRIPT_ROLES = {"user", "assistant", "system"}
MIN_TRANSCRIPT_MESSAGES = 4
SHORT_ANSWER_CHARS = 10


def tag_questions(questions: List[str]) -> List[Dict[str, Any]]:
    """Difficulty by thirds of the list; category from the wording."""
    count = len(questions)
    tagged = []
    for i, q in enumerate(questions):
        if i < count / 3:
            difficulty = "easy"
        elif i < 2 * count / 3:
            difficulty = "medium"
        else:
            difficulty = "hard"
        tagged.append({
            "question": q,
            "expectedAnswer": "",
            "difficulty": difficulty,
            "category": "technical" if "technical" in q.lower() else "behavioral",
            "topic": "finance",
        })
    return tagged


def normalize_transcript(transcript: Union[str, List[Any]]) -> List[Dict[str, Any]]:
    """Accept a JSON string or a list; every message needs a known role and content."""
    invalid = BadRequest("Invalid transcript format: must be valid JSON array of messages")
    if isinstance(transcript, str):
        try:
            transcript = json.loads(transcript)
        except json.JSONDecodeError as e:
            raise invalid from e
    if not isinstance(transcript, list):
        raise invalid
    for i, message in enumerate(transcript):
        if not isinstance(message, dict) or not message.get("role") or not message.get("content"):
            raise BadRequest(invalid.message, details=f"Invalid message format at index {i}")
        if message["role"] not in TRANSCRIPT_ROLES:
            raise BadRequest(invalid.message, details=f"Invalid message role at index {i}")
    return transcript


def check_transcript_quality(transcript: List[Dict[str, Any]]) -> None:
    if len(transcript) < MIN_TRANSCRIPT_MESSAGES:
        raise BadRequest("Invalid transcript: Transcript too short")
    user_msgs = [m for m in transcript if m.get("role") == "user"]
    if not user_msgs or not any(m.get("role") == "assistant" for m in transcript):
        raise BadRequest("Invalid transcript: Transcript missing user responses or interviewer questions")
    short = [m for m in user_msgs if len(str(m.get("content", ""))) < SHORT_ANSWER_CHARS]
    if len(short) > len(user_msgs) / 2:
        raise BadRequest("Invalid transcript: Too many short or truncated responses")


class InterviewService:
    """Mock interviews: question generation, session recording, analysis."""

    def __init__(self, engine: Engine, llm: LLMClient):
        self.engine = engine
        self.llm = llm

    # ---------- Generate ----------
    def generate(self, user_id: str, req: GenerateInterviewRequest) -> GeneratedInterview:
        prompt = interview_questions_prompt(
            req.company, req.role, req.question_count, req.type, req.job_description
        )
        raw = self.llm.complete(prompt, system=JSON_ONLY_SYSTEM)
        questions = parse_ai_value(raw, List[str])
        if len(questions) != req.question_count:
            raise AIResponseValidationError(
                details=f"Expected {req.question_count} questions but got {len(questions)}"
            )

        interview = GeneratedInterview(
            user_id=user_id,
            company=req.company,
            role=req.role,
            job_description=req.job_description,
            question_count=req.question_count,
            interview_type=req.type,
            questions=tag_questions(questions),
            status="generated",
        )
        with session_scope(self.engine) as session:
            session.add(interview)
            session.commit()
            session.refresh(interview)
        logger.info("Generated interview %s with %d questions", interview.id, req.question_count)
        return interview

    # ---------- Sessions ----------
    def record_session(self, user_id: str, req: InterviewSessionRequest) -> InterviewSession:
        self._owned_interview(req.interview_id, user_id)
        transcript = normalize_transcript(req.transcript)
        now = utcnow()
        record = InterviewSession(
            interview_id=req.interview_id,
            user_id=user_id,
            status=req.status,
            transcript=transcript,
            created_at=now,
            completed_at=now if req.status == "completed" else None,
        )
        with session_scope(self.engine) as session:
            session.add(record)
            session.commit()
            session.refresh(record)
        logger.info("Recorded interview session %s (%s, %d messages)", record.id, record.status, len(transcript))
        return record

    # ---------- Analysis ----------
    def analyze(self, user_id: str, session_id: str) -> InterviewAnalysisRecord:
        with session_scope(self.engine) as session:
            interview_session = session.get(InterviewSession, session_id)
            if interview_session is None or interview_session.user_id != user_id:
                raise NotFound("Failed to fetch interview session")
            existing = session.exec(
                select(InterviewAnalysisRecord).where(InterviewAnalysisRecord.session_id == session_id)
            ).first()
            if existing is not None:
                raise Conflict("Analysis already exists for this session")
            interview = session.get(GeneratedInterview, interview_session.interview_id)
            if interview is None:
                raise NotFound("Interview not found")

        if interview_session.status != "completed":
            raise BadRequest("Interview session is not completed")
        transcript = interview_session.transcript or []
        check_transcript_quality(transcript)

        prompt = interview_analysis_prompt(
            interview.company, interview.role, interview.interview_type, interview.questions, transcript
        )
        raw = self.llm.complete(prompt, system=JSON_ONLY_SYSTEM)
        analysis = parse_ai_model(raw, InterviewAnalysis)

        record = InterviewAnalysisRecord(
            session_id=session_id,
            overall_score=analysis.overall_score,
            technical_score=analysis.technical_score,
            behavioral_score=analysis.behavioral_score,
            communication_score=analysis.communication_score,
            confidence_score=analysis.confidence_score,
            analysis_summary=analysis.analysis_summary,
            strengths=analysis.strengths,
            areas_for_improvement=analysis.areas_for_improvement,
            detailed_feedback=analysis.detailed_feedback.model_dump(mode="json"),
        )
        with session_scope(self.engine) as session:
            session.add(record)
            stored = session.get(GeneratedInterview, interview.id)
            stored.status = "analyzed"
            session.add(stored)
            try:
                session.commit()
            except IntegrityError as e:
                # another request stored this session's analysis after our check
                session.rollback()
                raise Conflict("Analysis already exists for this session") from e
            session.refresh(record)
        logger.info("Stored analysis %s for session %s", record.id, session_id)
        return record

    def _owned_interview(self, interview_id: str, user_id: str) -> GeneratedInterview:
        with session_scope(self.engine) as session:
            interview = session.get(GeneratedInterview, interview_id)
        if interview is None or interview.user_id != user_id:
            raise NotFound("Interview not found")
        return interview
