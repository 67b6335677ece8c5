# backend/app/core/llm_client.py

import logging
from typing import Optional

import litellm

from backend.app.config import Settings
from backend.app.core.errors import UpstreamFailure

logger = logging.getLogger(__name__)


class LLMClient:
    """Single-shot chat completions through LiteLLM."""

    def __init__(
        self,
        model_id: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.0,
        max_tokens: int = 4000,
        timeout: int = 120,
    ):
        self.model_id = model_id
        self.api_key = api_key or None
        self.base_url = base_url or None
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMClient":
        return cls(
            model_id=settings.full_model_id(),
            api_key=settings.LLM_API_KEY,
            base_url=settings.LLM_BASE_URL,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            timeout=settings.LLM_REQUEST_TIMEOUT,
        )

    def complete(self, prompt: str, system: Optional[str] = None) -> str:
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        logger.info("LLM request model_id=%s prompt_chars=%d", self.model_id, len(prompt))
        try:
            resp = litellm.completion(
                model=self.model_id,
                api_base=self.base_url,
                api_key=self.api_key,
                timeout=self.timeout,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            # LiteLLM maps every provider error onto its own exception types
            raise UpstreamFailure("AI provider request failed", details=str(e)) from e

        try:
            txt = resp.choices[0].message.content
        except (AttributeError, IndexError, KeyError) as e:
            raise UpstreamFailure("No content in AI provider response") from e
        if not txt:
            raise UpstreamFailure("No content in AI provider response")
        # We just log short content
        logger.info("LLM response (truncated): %s", txt[:120])
        return txt
