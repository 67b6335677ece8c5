# backend/app/core/clients.py

from dataclasses import dataclass

from sqlalchemy.engine import Engine

from backend.app.config import Settings
from backend.app.core.analysis_worker import AnalysisWorker
from backend.app.core.auth import TokenVerifier
from backend.app.core.database import create_db_engine, init_db
from backend.app.core.file_fetcher import ResumeFileFetcher
from backend.app.core.interviews import InterviewService
from backend.app.core.job_store import JobStore, ResumeStore
from backend.app.core.llm_client import LLMClient
from backend.app.core.networking import NetworkingService
from backend.app.core.pdf_parser import ResumeTextExtractor
from backend.app.core.resume_analyzer import ResumeAnalyzer


@dataclass
class ServiceClients:
    """
    Process-scoped clients for the database, file storage and the LLM.
    Built once at process start and closed at shutdown.
    """
    settings: Settings
    engine: Engine
    llm: LLMClient
    fetcher: ResumeFileFetcher
    extractor: ResumeTextExtractor
    verifier: TokenVerifier

    @classmethod
    def build(cls, settings: Settings) -> "ServiceClients":
        engine = create_db_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)
        init_db(engine)
        return cls(
            settings=settings,
            engine=engine,
            llm=LLMClient.from_settings(settings),
            fetcher=ResumeFileFetcher(timeout=settings.RESUME_FETCH_TIMEOUT),
            extractor=ResumeTextExtractor(),
            verifier=TokenVerifier(
                settings.AUTH_JWT_SECRET,
                algorithm=settings.AUTH_JWT_ALGORITHM,
                audience=settings.AUTH_JWT_AUDIENCE,
            ),
        )

    # ---------- Services ----------
    @property
    def jobs(self) -> JobStore:
        return JobStore(self.engine)

    @property
    def resumes(self) -> ResumeStore:
        return ResumeStore(self.engine)

    def analysis_worker(self) -> AnalysisWorker:
        return AnalysisWorker(
            jobs=self.jobs,
            resumes=self.resumes,
            fetcher=self.fetcher,
            extractor=self.extractor,
            analyzer=ResumeAnalyzer(self.llm, max_chars=self.settings.MAX_RESUME_CHARS),
        )

    def interviews(self) -> InterviewService:
        return InterviewService(self.engine, self.llm)

    def networking(self) -> NetworkingService:
        return NetworkingService(self.engine, self.llm)

    def close(self) -> None:
        self.fetcher.close()
        self.engine.dispose()
