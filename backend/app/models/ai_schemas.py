# backend/app/models/ai_schemas.py

from typing import List, Optional
from pydantic import BaseModel, Field


# ---------- Resume analysis ----------
class SectionFeedback(BaseModel):
    score: int = Field(ge=0, le=100)
    feedback: str
    suggestions: List[str] = []

class SuggestedEdit(BaseModel):
    original: str
    improved: str
    explanation: str = ""

class ResumeAnalysisResult(BaseModel):
    overallScore: int = Field(ge=0, le=100)
    summary: str = Field(min_length=1)
    strengths: List[str] = []
    areasForImprovement: List[str] = []
    contentQuality: SectionFeedback
    formatting: SectionFeedback
    industryRelevance: SectionFeedback
    impactStatements: SectionFeedback
    suggestedEdits: List[SuggestedEdit] = []


# ---------- Interviews ----------
class QuestionFeedback(BaseModel):
    question: str
    response_quality: str
    score: int = Field(ge=0, le=100)

class DetailedFeedback(BaseModel):
    question_responses: List[QuestionFeedback] = []
    communication_analysis: str = ""
    technical_proficiency: Optional[str] = None
    behavioral_insights: Optional[str] = None
    transcript_quality_notes: Optional[str] = None

class InterviewAnalysis(BaseModel):
    overall_score: int = Field(ge=0, le=100)
    technical_score: Optional[int] = Field(default=None, ge=0, le=100)
    behavioral_score: Optional[int] = Field(default=None, ge=0, le=100)
    communication_score: int = Field(ge=0, le=100)
    confidence_score: int = Field(ge=0, le=100)
    analysis_summary: str = Field(min_length=1)
    strengths: List[str]
    areas_for_improvement: List[str]
    detailed_feedback: DetailedFeedback


# ---------- Networking ----------
class NetworkingDraft(BaseModel):
    subject: Optional[str] = None
    message: str = Field(min_length=1)
