# backend/app/config.py

from pydantic import BaseModel, Field
import os
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseModel):
    # Database
    DATABASE_URL: str = Field(default=os.getenv("DATABASE_URL", "sqlite:///./finprep.db"))
    DATABASE_ECHO: bool = Field(default=os.getenv("DATABASE_ECHO", "false").lower() == "true")

    # Auth provider tokens (JWTs signed by the provider)
    AUTH_JWT_SECRET: str = Field(default=os.getenv("AUTH_JWT_SECRET", ""))
    AUTH_JWT_ALGORITHM: str = Field(default=os.getenv("AUTH_JWT_ALGORITHM", "HS256"))
    AUTH_JWT_AUDIENCE: str = Field(default=os.getenv("AUTH_JWT_AUDIENCE", "authenticated"))

    # LLM config
    LLM_PROVIDER: str = Field(default=os.getenv("LLM_PROVIDER", "gemini"))
    LLM_API_KEY: str = Field(default=os.getenv("LLM_API_KEY", ""))
    LLM_BASE_URL: str = Field(default=os.getenv("LLM_BASE_URL", ""))
    LLM_MODEL_NAME: str = Field(default=os.getenv("LLM_MODEL_NAME", "gemini-2.0-flash"))
    LLM_TEMPERATURE: float = Field(default=float(os.getenv("LLM_TEMPERATURE", "0.0")))
    LLM_MAX_TOKENS: int = Field(default=int(os.getenv("LLM_MAX_TOKENS", "4000")))
    # Request timeout in seconds for LiteLLM
    LLM_REQUEST_TIMEOUT: int = Field(default=int(os.getenv("LLM_REQUEST_TIMEOUT", "120")))

    # Shared secrets
    JOB_TRIGGER_API_KEY: str = Field(default=os.getenv("JOB_TRIGGER_API_KEY", ""))
    INTERNAL_PARSE_SECRET: str = Field(default=os.getenv("INTERNAL_PARSE_SECRET", ""))

    # Analysis jobs
    JOB_BATCH_SIZE: int = Field(default=int(os.getenv("JOB_BATCH_SIZE", "5")))
    SCHEDULER_INTERVAL_SECONDS: float = Field(default=float(os.getenv("SCHEDULER_INTERVAL_SECONDS", "60")))
    RESUME_FETCH_TIMEOUT: float = Field(default=float(os.getenv("RESUME_FETCH_TIMEOUT", "30")))
    MAX_RESUME_CHARS: int = Field(default=int(os.getenv("MAX_RESUME_CHARS", "28000")))

    # Celery/Redis
    REDIS_URL: str = Field(default=os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    CELERY_SOFT_TIME_LIMIT: int = Field(default=int(os.getenv("CELERY_SOFT_TIME_LIMIT", "600")))  #10 min
    CELERY_HARD_TIME_LIMIT: int = Field(default=int(os.getenv("CELERY_HARD_TIME_LIMIT", "660")))  # soft + buffer

    # API
    BACKEND_CORS_ORIGINS: str = Field(default=os.getenv("BACKEND_CORS_ORIGINS", "http://localhost:8501,http://127.0.0.1:8501"))
    LOG_LEVEL: str = Field(default=os.getenv("LOG_LEVEL", "INFO"))


    def full_model_id(self) -> str:
        """
        Return provider-prefixed model id for LiteLLM, e.g.:
        - 'gemini/gemini-2.0-flash'
        - 'openai/gpt-4o-mini'
        - 'ollama/llama3.2'
        """
        provider = self.LLM_PROVIDER.strip().lower()
        # If already prefixed, keep as is
        if "/" in self.LLM_MODEL_NAME:
            return self.LLM_MODEL_NAME
        return f"{provider}/{self.LLM_MODEL_NAME}"

    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.BACKEND_CORS_ORIGINS.split(",") if o.strip()]

    def batch_size(self) -> int:
        """Scheduler batch size, clamped to 1..5."""
        return max(1, min(self.JOB_BATCH_SIZE, 5))


settings = Settings()
