# backend/app/core/resume_analyzer.py

from typing import Optional

from backend.app.core.ai_validation import parse_ai_model
from backend.app.core.llm_client import LLMClient
from backend.app.core.prompts import JSON_ONLY_SYSTEM, resume_analysis_prompt
from backend.app.models.ai_schemas import ResumeAnalysisResult


class ResumeAnalyzer:
    """Runs the resume analysis prompt and validates the result."""

    def __init__(self, llm: LLMClient, max_chars: int = 28000):
        self.llm = llm
        self.max_chars = max_chars

    def analyze(
        self,
        resume_text: str,
        job_role: Optional[str] = None,
        industry: Optional[str] = None,
        experience_level: Optional[str] = None,
    ) -> ResumeAnalysisResult:
        if not (resume_text or "").strip():
            raise ValueError("Resume text is empty.")
        prompt = resume_analysis_prompt(resume_text[: self.max_chars], job_role, industry, experience_level)
        raw = self.llm.complete(prompt, system=JSON_ONLY_SYSTEM)
        return parse_ai_model(raw, ResumeAnalysisResult)
