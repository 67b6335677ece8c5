"""
Tests for mock interviews: question generation, session recording and
transcript analysis, through the API with the LLM mocked.

Run tests with: pytest backend/tests/test_interviews.py -v
"""

import json

import pytest

from backend.app.core.errors import BadRequest
from backend.app.core.interviews import check_transcript_quality, normalize_transcript, tag_questions
from conftest import bearer

QUESTIONS = [
    "Walk me through the three financial statements.",
    "Tell me about a time you worked under a tight deadline.",
    "Explain a technical valuation method you have used.",
]

TRANSCRIPT = [
    {"role": "assistant", "content": "Walk me through the three financial statements."},
    {"role": "user", "content": "The income statement shows revenue and expenses down to net income..."},
    {"role": "assistant", "content": "Tell me about a time you worked under a tight deadline."},
    {"role": "user", "content": "During my internship we had a live deal with a 48 hour turnaround..."},
]

ANALYSIS = {
    "overall_score": 72,
    "technical_score": 70,
    "behavioral_score": 75,
    "communication_score": 80,
    "confidence_score": 65,
    "analysis_summary": "Clear answers; technical depth can improve.",
    "strengths": ["Structured answers"],
    "areas_for_improvement": ["Quantify impact"],
    "detailed_feedback": {
        "question_responses": [
            {"question": QUESTIONS[0], "response_quality": "Good", "score": 70},
        ],
        "communication_analysis": "Concise.",
    },
}


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def generate(client, llm, user_id="user-1", questions=QUESTIONS, count=3):
    llm.complete.return_value = json.dumps(questions)
    body = {"company": "Goldman Sachs", "role": "IB Analyst", "questionCount": count, "type": "mixed"}
    return client.post("/api/interview/generate", json=body, headers=bearer(user_id))


def record(client, interview_id, user_id="user-1", status="completed", transcript=TRANSCRIPT):
    body = {"interview_id": interview_id, "status": status, "transcript": transcript}
    return client.post("/api/interview/session", json=body, headers=bearer(user_id))


def analyze(client, session_id, user_id="user-1"):
    return client.post("/api/interview/analyze", json={"session_id": session_id}, headers=bearer(user_id))


# ============================================================================
# TESTS
# ============================================================================

class TestTranscriptHelpers:

    def test_tag_questions_by_thirds(self):
        tagged = tag_questions(QUESTIONS)
        assert [q["difficulty"] for q in tagged] == ["easy", "medium", "hard"]
        assert [q["category"] for q in tagged] == ["behavioral", "behavioral", "technical"]
        assert all(q["topic"] == "finance" for q in tagged)

    def test_normalize_accepts_json_string(self):
        assert normalize_transcript(json.dumps(TRANSCRIPT)) == TRANSCRIPT

    @pytest.mark.parametrize(
        "transcript",
        ["not json", '{"role": "user"}', [{"role": "user"}], [{"role": "interviewer", "content": "hi"}]],
    )
    def test_normalize_rejects_bad_shapes(self, transcript):
        with pytest.raises(BadRequest):
            normalize_transcript(transcript)

    def test_quality_too_short(self):
        with pytest.raises(BadRequest) as exc:
            check_transcript_quality(TRANSCRIPT[:3])
        assert exc.value.message == "Invalid transcript: Transcript too short"

    def test_quality_needs_both_sides(self):
        only_user = [{"role": "user", "content": "A long enough answer here"}] * 4
        with pytest.raises(BadRequest):
            check_transcript_quality(only_user)

    def test_quality_too_many_short_answers(self):
        short = TRANSCRIPT[:1] + [{"role": "user", "content": "ok"}] + TRANSCRIPT[2:3] + [{"role": "user", "content": "yes"}]
        with pytest.raises(BadRequest) as exc:
            check_transcript_quality(short)
        assert exc.value.message == "Invalid transcript: Too many short or truncated responses"

    def test_quality_passes(self):
        check_transcript_quality(TRANSCRIPT)


class TestGenerate:

    def test_generates_and_persists(self, test_client, llm):
        response = generate(test_client, llm)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "generated"
        assert data["interview_type"] == "mixed"
        assert [q["question"] for q in data["questions"]] == QUESTIONS

    def test_wrong_question_count(self, test_client, llm):
        response = generate(test_client, llm, questions=QUESTIONS[:2], count=3)

        assert response.status_code == 502
        assert response.json() == {
            "error": "Invalid response from AI provider",
            "details": "Expected 3 questions but got 2",
        }

    def test_question_count_bounds(self, test_client, llm):
        assert generate(test_client, llm, count=0).status_code == 400
        assert generate(test_client, llm, count=31).status_code == 400


class TestSessions:

    def test_record_session(self, test_client, llm):
        interview_id = generate(test_client, llm).json()["id"]

        response = record(test_client, interview_id, transcript=json.dumps(TRANSCRIPT))

        assert response.status_code == 200
        session = response.json()["session"]
        assert session["status"] == "completed"
        assert session["completed_at"] is not None
        assert session["transcript"] == TRANSCRIPT

    def test_other_users_interview(self, test_client, llm):
        interview_id = generate(test_client, llm).json()["id"]
        response = record(test_client, interview_id, user_id="user-2")
        assert response.status_code == 404
        assert response.json()["error"] == "Interview not found"

    def test_invalid_transcript(self, test_client, llm):
        interview_id = generate(test_client, llm).json()["id"]
        response = record(test_client, interview_id, transcript="not json")
        assert response.status_code == 400


class TestAnalyze:

    @pytest.fixture
    def session_id(self, test_client, llm):
        interview_id = generate(test_client, llm).json()["id"]
        return record(test_client, interview_id).json()["session"]["id"]

    def test_analyze_once(self, test_client, llm, clients, session_id):
        llm.complete.return_value = json.dumps(ANALYSIS)

        first = analyze(test_client, session_id)
        second = analyze(test_client, session_id)

        assert first.status_code == 200
        assert first.json()["overall_score"] == 72
        assert first.json()["detailed_feedback"]["communication_analysis"] == "Concise."
        assert second.status_code == 409
        assert second.json()["error"] == "Analysis already exists for this session"

    def test_analysis_stored_while_in_flight(self, test_client, llm, clients, session_id):
        from sqlmodel import select
        from backend.app.core.database import session_scope
        from backend.app.models.records import InterviewAnalysisRecord

        def store_first_then_reply(*args, **kwargs):
            # a concurrent request finishes between the existence check and our insert
            with session_scope(clients.engine) as db:
                db.add(InterviewAnalysisRecord(
                    session_id=session_id,
                    overall_score=50,
                    communication_score=50,
                    confidence_score=50,
                    analysis_summary="Stored by the other request.",
                    strengths=[],
                    areas_for_improvement=[],
                    detailed_feedback={},
                ))
                db.commit()
            return json.dumps(ANALYSIS)

        llm.complete.side_effect = store_first_then_reply

        response = analyze(test_client, session_id)

        assert response.status_code == 409
        assert response.json()["error"] == "Analysis already exists for this session"
        with session_scope(clients.engine) as db:
            rows = db.exec(select(InterviewAnalysisRecord)).all()
        assert [r.analysis_summary for r in rows] == ["Stored by the other request."]

    def test_interview_marked_analyzed(self, test_client, llm, clients, session_id):
        from backend.app.core.database import session_scope
        from backend.app.models.records import GeneratedInterview, InterviewSession

        llm.complete.return_value = json.dumps(ANALYSIS)
        analyze(test_client, session_id)

        with session_scope(clients.engine) as db:
            interview_id = db.get(InterviewSession, session_id).interview_id
            assert db.get(GeneratedInterview, interview_id).status == "analyzed"

    def test_other_users_session(self, test_client, session_id):
        response = analyze(test_client, session_id, user_id="user-2")
        assert response.status_code == 404
        assert response.json()["error"] == "Failed to fetch interview session"

    def test_in_progress_session(self, test_client, llm):
        interview_id = generate(test_client, llm).json()["id"]
        session_id = record(test_client, interview_id, status="in_progress").json()["session"]["id"]

        response = analyze(test_client, session_id)

        assert response.status_code == 400
        assert response.json()["error"] == "Interview session is not completed"

    def test_invalid_ai_analysis(self, test_client, llm, session_id):
        llm.complete.return_value = json.dumps({**ANALYSIS, "confidence_score": 250})

        response = analyze(test_client, session_id)

        assert response.status_code == 502
        assert "confidence_score" in response.json()["details"]
