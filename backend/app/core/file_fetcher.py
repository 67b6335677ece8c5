# backend/app/core/file_fetcher.py

import logging
from typing import Optional

import requests

from backend.app.core.errors import UpstreamFailure

logger = logging.getLogger(__name__)


class ResumeFileFetcher:
    """Downloads resume files from their storage URL."""

    def __init__(self, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(self, url: str) -> bytes:
        if not url:
            raise UpstreamFailure("No resume URL found")
        logger.info("Downloading resume from %s...", url[:50])
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamFailure("Failed to download resume", details=str(e)) from e
        if not resp.ok:
            raise UpstreamFailure("Failed to download resume", details=f"{resp.status_code} {resp.reason}")
        logger.info("Resume downloaded, size=%d bytes", len(resp.content))
        return resp.content

    def close(self) -> None:
        self.session.close()
