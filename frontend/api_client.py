# frontend/api_client.py

import os
import time
from typing import Optional, Dict, Any, List
import requests

TERMINAL_STATUSES = ("completed", "failed")

class BackendClient:
    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None, timeout: float = 30.0):
        self.base_url = (base_url or os.getenv("BACKEND_URL") or "http://localhost:8000").rstrip("/")
        self.token = token
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _get(self, path: str, **params) -> Any:
        resp = requests.get(f"{self.base_url}{path}", params=params or None, headers=self._headers(), timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        resp = requests.post(f"{self.base_url}{path}", json=payload, headers=self._headers(), timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    # -------- Resumes --------
    def list_resumes(self) -> List[Dict[str, Any]]:
        return self._get("/api/resumes")

    def register_resume(self, file_name: str, file_type: str, resume_url: str) -> Dict[str, Any]:
        return self._post("/api/resumes", {"fileName": file_name, "fileType": file_type, "resumeUrl": resume_url})

    def latest_analysis(self, resume_id: str) -> Optional[Dict[str, Any]]:
        """Most recent completed analysis for the resume, or None if it was never analyzed."""
        try:
            return self._get(f"/api/resumes/{resume_id}/analysis")
        except requests.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                return None
            raise

    # -------- Analysis jobs --------
    def create_analysis_job(
        self,
        resume_id: str,
        job_role: Optional[str] = None,
        industry: Optional[str] = None,
        experience_level: Optional[str] = None,
    ) -> str:
        payload = {
            "resumeId": resume_id,
            "jobRole": job_role,
            "industry": industry,
            "experienceLevel": experience_level,
        }
        return self._post("/api/create-analysis-job", payload)["jobId"]

    def job_status(self, job_id: str) -> Dict[str, Any]:
        return self._get("/api/get-analysis-status", jobId=job_id)

    def download_url(self, job_id: str, fmt: str = "pdf") -> str:
        return f"{self.base_url}/api/analysis-report/{job_id}?format={fmt}"

    def download_report(self, job_id: str, fmt: str = "pdf") -> bytes:
        resp = requests.get(self.download_url(job_id, fmt), headers=self._headers(), timeout=self.timeout)
        resp.raise_for_status()
        return resp.content

    # -------- Convenience: poll with progress callback --------
    def wait_with_progress(
        self,
        job_id: str,
        total_wait: float = 180.0,
        poll_interval: float = 3.0,
        on_tick=None,
    ) -> Dict[str, Any]:
        """
        Poll until the job reaches a terminal state or total_wait runs out.
        Failed jobs are returned as-is; there is no automatic retry.
        """
        elapsed = 0.0
        while elapsed < total_wait:
            try:
                res = self.job_status(job_id)
            except requests.RequestException as e:
                res = {"status": "unknown", "error": str(e)}
            if on_tick:
                on_tick(elapsed, res.get("status"))
            if res.get("status") in TERMINAL_STATUSES:
                return res
            time.sleep(poll_interval)
            elapsed += poll_interval
        # Fallback: final status fetch
        return self.job_status(job_id)

    # -------- Interviews & networking --------
    def generate_interview(self, company: str, role: str, question_count: int, type_: str,
                           job_description: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            "company": company,
            "role": role,
            "questionCount": question_count,
            "type": type_,
            "jobDescription": job_description,
        }
        return self._post("/api/interview/generate", payload)

    def generate_networking_message(self, company_name: str, role: str, resume_text: str, message_type: str,
                                    contact_name: Optional[str] = None) -> Dict[str, Any]:
        payload = {
            "companyName": company_name,
            "role": role,
            "resumeText": resume_text,
            "messageType": message_type,
            "contactName": contact_name,
        }
        return self._post("/api/networking/generate", payload)
