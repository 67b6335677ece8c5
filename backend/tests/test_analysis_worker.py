"""
Tests for the analysis worker: the happy path and every way a job ends up
`failed`, plus the guards for unknown and already-finished jobs.

Run tests with: pytest backend/tests/test_analysis_worker.py -v
"""

import json
from unittest.mock import patch

import pytest

from backend.app.core.errors import UpstreamFailure
from conftest import ANALYSIS_RESULT


@pytest.fixture
def worker(clients):
    return clients.analysis_worker()


@pytest.fixture
def job(clients, resume):
    return clients.jobs.create(resume.id, "user-1", job_role="Investment Banking Analyst")


class TestHappyPath:

    def test_pending_job_is_completed(self, clients, worker, job, fetcher, llm):
        outcome = worker.process(job.id)

        assert outcome == {"jobId": job.id, "success": True, "error": None}
        done = clients.jobs.get(job.id)
        assert done.status == "completed"
        assert done.result == ANALYSIS_RESULT
        assert done.completed_at is not None
        fetcher.fetch.assert_called_once_with("https://files.example.com/jane_doe.txt")

    def test_prompt_carries_resume_text_and_target(self, worker, job, llm):
        worker.process(job.id)

        prompt = llm.complete.call_args.args[0]
        assert "Goldman Sachs" in prompt
        assert "Investment Banking Analyst" in prompt

    def test_job_claimed_by_scheduler_is_processed(self, clients, worker, job):
        assert clients.jobs.claim(job.id)

        assert worker.process(job.id)["success"] is True
        assert clients.jobs.get(job.id).status == "completed"

    def test_fenced_json_reply_is_accepted(self, clients, worker, job, llm):
        llm.complete.return_value = "Here is the analysis:\n```json\n" + json.dumps(ANALYSIS_RESULT) + "\n```"

        assert worker.process(job.id)["success"] is True
        assert clients.jobs.get(job.id).result["overallScore"] == 78


class TestLatestAnalysis:

    def test_completion_saves_latest_analysis(self, clients, worker, job, resume):
        worker.process(job.id)

        latest = clients.resumes.latest_analysis(resume.id)
        assert latest.job_id == job.id
        assert latest.user_id == "user-1"
        assert latest.analysis_result == ANALYSIS_RESULT

    def test_newer_job_overwrites_the_same_row(self, clients, worker, job, resume, llm):
        from sqlmodel import select
        from backend.app.core.database import session_scope
        from backend.app.models.records import ResumeAnalysis

        rescored = {**ANALYSIS_RESULT, "overallScore": 85}
        llm.complete.side_effect = [json.dumps(ANALYSIS_RESULT), json.dumps(rescored)]
        second = clients.jobs.create(resume.id, "user-1")

        worker.process(job.id)
        worker.process(second.id)

        with session_scope(clients.engine) as db:
            rows = db.exec(select(ResumeAnalysis)).all()
        assert len(rows) == 1
        assert rows[0].job_id == second.id
        assert rows[0].analysis_result["overallScore"] == 85
        assert rows[0].updated_at >= rows[0].created_at

    def test_failed_job_leaves_latest_analysis_alone(self, clients, worker, job, resume, fetcher):
        worker.process(job.id)
        fetcher.fetch.side_effect = UpstreamFailure("Failed to download resume", details="404 Not Found")
        failed = clients.jobs.create(resume.id, "user-1")

        worker.process(failed.id)

        assert clients.resumes.latest_analysis(resume.id).job_id == job.id

    def test_upsert_error_does_not_fail_the_job(self, clients, worker, job, resume):
        from sqlalchemy.exc import OperationalError

        error = OperationalError("INSERT INTO resume_analyses", {}, Exception("database is locked"))
        with patch.object(clients.resumes, "save_latest_analysis", side_effect=error):
            outcome = worker.process(job.id)

        assert outcome["success"] is True
        assert clients.jobs.get(job.id).status == "completed"
        assert clients.resumes.latest_analysis(resume.id) is None


class TestGuards:

    def test_unknown_job(self, worker, llm):
        assert worker.process("no-such-job") == {"jobId": "no-such-job", "success": False, "error": "Job not found"}
        llm.complete.assert_not_called()

    def test_completed_job_is_left_alone(self, clients, worker, job, llm):
        clients.jobs.claim(job.id)
        clients.jobs.complete(job.id, {"overallScore": 1})

        outcome = worker.process(job.id)

        assert outcome["error"] == "Job already completed"
        assert clients.jobs.get(job.id).result == {"overallScore": 1}
        llm.complete.assert_not_called()

    def test_failed_job_is_not_retried(self, clients, worker, job, fetcher):
        clients.jobs.claim(job.id)
        clients.jobs.fail(job.id, "Failed to dispatch job: broker unavailable")

        assert worker.process(job.id)["error"] == "Job already failed"
        fetcher.fetch.assert_not_called()
        assert clients.jobs.get(job.id).error_message == "Failed to dispatch job: broker unavailable"


class TestFailures:

    def _failed(self, clients, job_id):
        stored = clients.jobs.get(job_id)
        assert stored.status == "failed"
        assert stored.result is None
        assert stored.completed_at is None
        return stored.error_message

    def test_missing_resume(self, clients, worker):
        job = clients.jobs.create("deleted-resume", "user-1")

        outcome = worker.process(job.id)

        assert outcome["success"] is False
        assert self._failed(clients, job.id) == "Resume not found"

    def test_download_failure(self, clients, worker, job, fetcher, llm):
        fetcher.fetch.side_effect = UpstreamFailure("Failed to download resume", details="404 Not Found")

        worker.process(job.id)

        assert self._failed(clients, job.id) == "Error processing file: Failed to download resume: 404 Not Found"
        llm.complete.assert_not_called()

    def test_unsupported_file_type(self, clients, worker, llm):
        resume = clients.resumes.create("user-1", "photo.png", "image/png", "https://files.example.com/photo.png")
        job = clients.jobs.create(resume.id, "user-1")

        worker.process(job.id)

        assert self._failed(clients, job.id) == "Error processing file: Unsupported file type: image/png"
        llm.complete.assert_not_called()

    def test_empty_extraction(self, clients, worker, job, fetcher):
        fetcher.fetch.return_value = b"   \n  "

        worker.process(job.id)

        assert self._failed(clients, job.id) == "Error processing file: no text could be extracted from resume"

    def test_non_json_reply(self, clients, worker, job, llm):
        llm.complete.return_value = "I'm sorry, I can't help with that."

        worker.process(job.id)

        assert self._failed(clients, job.id).startswith("Analysis error: Invalid response from AI provider")

    def test_reply_outside_schema(self, clients, worker, job, llm):
        llm.complete.return_value = json.dumps({**ANALYSIS_RESULT, "overallScore": 140})

        worker.process(job.id)

        message = self._failed(clients, job.id)
        assert message.startswith("Analysis error:")
        assert "overallScore" in message

    def test_provider_error(self, clients, worker, job, llm):
        llm.complete.side_effect = UpstreamFailure("AI provider request failed", details="rate limited")

        outcome = worker.process(job.id)

        assert outcome["error"] == "Analysis error: AI provider request failed: rate limited"
        assert self._failed(clients, job.id) == outcome["error"]

    def test_unexpected_error_is_recorded(self, clients, worker, job, llm):
        llm.complete.side_effect = RuntimeError("connection reset")

        outcome = worker.process(job.id)

        assert outcome["success"] is False
        assert self._failed(clients, job.id) == "connection reset"
