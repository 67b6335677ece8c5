# backend/app/core/networking.py

import logging

from sqlalchemy.engine import Engine

from backend.app.core.ai_validation import parse_ai_model
from backend.app.core.database import session_scope
from backend.app.core.llm_client import LLMClient
from backend.app.core.prompts import JSON_ONLY_SYSTEM, networking_prompt
from backend.app.models.ai_schemas import NetworkingDraft
from backend.app.models.networking_models import (
    DEFAULT_MESSAGE_TYPE,
    MESSAGE_TYPES,
    NetworkingRequest,
)
from backend.app.models.records import NetworkingMessage

logger = logging.getLogger(__name__)


class NetworkingService:
    """Generates outreach messages and keeps a copy per user."""

    def __init__(self, engine: Engine, llm: LLMClient, max_resume_chars: int = 6000):
        self.engine = engine
        self.llm = llm
        self.max_resume_chars = max_resume_chars

    @staticmethod
    def resolve_message_type(message_type: str) -> str:
        mt = (message_type or "").strip().lower()
        return mt if mt in MESSAGE_TYPES else DEFAULT_MESSAGE_TYPE

    def generate(self, user_id: str, req: NetworkingRequest) -> NetworkingMessage:
        message_type = self.resolve_message_type(req.message_type)
        prompt = networking_prompt(
            req.company_name,
            req.role,
            message_type,
            req.resume_text[: self.max_resume_chars],
            contact_name=req.contact_name,
            contact_role=req.contact_role,
        )
        raw = self.llm.complete(prompt, system=JSON_ONLY_SYSTEM)
        draft = parse_ai_model(raw, NetworkingDraft)

        record = NetworkingMessage(
            user_id=user_id,
            company_name=req.company_name,
            role=req.role,
            contact_name=req.contact_name,
            contact_role=req.contact_role,
            message_type=message_type,
            # LinkedIn messages have no subject line
            subject=None if message_type == "linkedin_message" else draft.subject,
            message=draft.message.strip(),
        )
        with session_scope(self.engine) as session:
            session.add(record)
            session.commit()
            session.refresh(record)
        logger.info("Generated %s %s for %s", message_type, record.id, req.company_name)
        return record
