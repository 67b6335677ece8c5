#backend/app/api/interview_routes.py

from fastapi import APIRouter, Depends

from backend.app.api.dependencies import get_clients, get_current_user_id
from backend.app.core.clients import ServiceClients
from backend.app.models.interview_models import (
    AnalyzeInterviewRequest,
    GenerateInterviewRequest,
    GeneratedInterviewResponse,
    InterviewAnalysisResponse,
    InterviewSessionOut,
    InterviewSessionRequest,
    InterviewSessionResponse,
)

interview_router = APIRouter(prefix="/api/interview", tags=["Interviews"])

@interview_router.post("/generate", response_model=GeneratedInterviewResponse)
def generate_interview(
    request: GenerateInterviewRequest,
    user_id: str = Depends(get_current_user_id),
    clients: ServiceClients = Depends(get_clients),
):
    """Generate mock interview questions for a role and save them."""
    interview = clients.interviews().generate(user_id, request)
    return GeneratedInterviewResponse.model_validate(interview, from_attributes=True)

@interview_router.post("/session", response_model=InterviewSessionResponse)
def record_session(
    request: InterviewSessionRequest,
    user_id: str = Depends(get_current_user_id),
    clients: ServiceClients = Depends(get_clients),
):
    session = clients.interviews().record_session(user_id, request)
    return InterviewSessionResponse(session=InterviewSessionOut.model_validate(session, from_attributes=True))

@interview_router.post("/analyze", response_model=InterviewAnalysisResponse)
def analyze_interview(
    request: AnalyzeInterviewRequest,
    user_id: str = Depends(get_current_user_id),
    clients: ServiceClients = Depends(get_clients),
):
    """Score a completed interview session. Each session is analyzed at most once."""
    record = clients.interviews().analyze(user_id, request.session_id)
    return InterviewAnalysisResponse.model_validate(record, from_attributes=True)
