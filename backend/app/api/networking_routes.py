#backend/app/api/networking_routes.py

from fastapi import APIRouter, Depends

from backend.app.api.dependencies import get_clients, get_current_user_id
from backend.app.core.clients import ServiceClients
from backend.app.models.networking_models import NetworkingRequest, NetworkingResponse

networking_router = APIRouter(prefix="/api/networking", tags=["Networking"])

@networking_router.post("/generate", response_model=NetworkingResponse)
def generate_message(
    request: NetworkingRequest,
    user_id: str = Depends(get_current_user_id),
    clients: ServiceClients = Depends(get_clients),
):
    record = clients.networking().generate(user_id, request)
    return NetworkingResponse(
        id=record.id,
        message_type=record.message_type,
        subject=record.subject,
        message=record.message,
    )
