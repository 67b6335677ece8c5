# backend/app/core/prompts.py

import json
from typing import Any, Dict, List, Optional

JSON_ONLY_SYSTEM = (
    "You are a careful finance career coach. "
    "Respond ONLY with valid JSON matching the requested structure. "
    "No markdown, no code fences, no text outside the JSON."
)

RESUME_ANALYSIS_SCHEMA = """
{
  "overallScore": integer 0-100,
  "summary": string,
  "strengths": [string],
  "areasForImprovement": [string],
  "contentQuality": {"score": integer 0-100, "feedback": string, "suggestions": [string]},
  "formatting": {"score": integer 0-100, "feedback": string, "suggestions": [string]},
  "industryRelevance": {"score": integer 0-100, "feedback": string, "suggestions": [string]},
  "impactStatements": {"score": integer 0-100, "feedback": string, "suggestions": [string]},
  "suggestedEdits": [{"original": string, "improved": string, "explanation": string}]
}
""".strip()


def resume_analysis_prompt(
    resume_text: str,
    job_role: Optional[str],
    industry: Optional[str],
    experience_level: Optional[str],
) -> str:
    return f"""
Analyze the resume below for a {job_role or "finance professional"} position
in the {industry or "finance"} industry, experience level: {experience_level or "not specified"}.

Score each section and give concrete, finance-specific suggestions
(quantified achievements, relevant technical skills, industry terminology).

Return JSON with exactly this structure:
{RESUME_ANALYSIS_SCHEMA}

RESUME TEXT:
{resume_text}
""".strip()


INTERVIEW_FOCUS = {
    "technical": "Focus on technical finance concepts and problem-solving.",
    "behavioral": "Focus on past experiences and soft skills.",
}


def interview_questions_prompt(
    company: str,
    role: str,
    question_count: int,
    interview_type: str,
    job_description: Optional[str] = None,
) -> str:
    jd = f"Consider this job description:\n{job_description}\n" if job_description else ""
    focus = INTERVIEW_FOCUS.get(interview_type, "Mix technical and behavioral questions.")
    return f"""
Generate exactly {question_count} interview questions for a {role} position at {company}.
{jd}
{focus}
Questions must be relevant to the finance industry and the role, clear, and unique.

Return a JSON array of {question_count} strings, e.g. ["Question 1", "Question 2"].
""".strip()


INTERVIEW_ANALYSIS_SCHEMA = """
{
  "overall_score": integer 0-100,
  "technical_score": integer 0-100 or null,
  "behavioral_score": integer 0-100 or null,
  "communication_score": integer 0-100,
  "confidence_score": integer 0-100,
  "analysis_summary": string,
  "strengths": [string],
  "areas_for_improvement": [string],
  "detailed_feedback": {
    "question_responses": [{"question": string, "response_quality": string, "score": integer 0-100}],
    "communication_analysis": string,
    "technical_proficiency": string or null,
    "behavioral_insights": string or null,
    "transcript_quality_notes": string or null
  }
}
""".strip()


def interview_analysis_prompt(
    company: str,
    role: str,
    interview_type: str,
    questions: List[Dict[str, Any]],
    transcript: List[Dict[str, Any]],
) -> str:
    return f"""
Evaluate this mock interview for a {role} position at {company} (type: {interview_type}).
Judge both answer content and communication style. If answers look truncated,
evaluate what is available and say so in transcript_quality_notes.

Questions: {json.dumps([q.get("question") for q in questions], ensure_ascii=False)}
Transcript: {json.dumps(transcript, ensure_ascii=False)}

Return JSON with exactly this structure:
{INTERVIEW_ANALYSIS_SCHEMA}
""".strip()


MESSAGE_TYPE_GUIDE = {
    "linkedin_message": "a short LinkedIn connection message (under 300 characters, no subject)",
    "intro_email": "a concise introductory email with a subject line",
    "cover_letter": "a one-page cover letter addressed to the contact",
}


def networking_prompt(
    company_name: str,
    role: str,
    message_type: str,
    resume_text: str,
    contact_name: Optional[str] = None,
    contact_role: Optional[str] = None,
) -> str:
    contact = contact_name or "Hiring Manager"
    if contact_role:
        contact = f"{contact} ({contact_role})"
    return f"""
Write {MESSAGE_TYPE_GUIDE[message_type]} from a candidate to {contact} at {company_name}
about the {role} position. Ground it in the candidate's background below;
mention one or two specific, relevant achievements. Sign off as [Your Name].

Return JSON: {{"subject": string or null, "message": string}}

CANDIDATE RESUME:
{resume_text}
""".strip()
