# backend/app/models/networking_models.py

from typing import Optional

from pydantic import Field

from backend.app.models.job_models import CamelModel

MESSAGE_TYPES = ("linkedin_message", "intro_email", "cover_letter")
DEFAULT_MESSAGE_TYPE = "intro_email"


class NetworkingRequest(CamelModel):
    company_name: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1)
    contact_name: Optional[str] = None
    contact_role: Optional[str] = None
    resume_text: str = Field(..., min_length=1)
    message_type: str = Field(..., min_length=1)


class NetworkingResponse(CamelModel):
    id: str
    message_type: str
    subject: Optional[str] = None
    message: str
    success: bool = True
