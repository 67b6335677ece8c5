#backend/app/api/dependencies.py

from typing import Optional

from fastapi import Depends, Header, Request

from backend.app.core.clients import ServiceClients
from backend.app.core.scheduler import JobDispatcher


def get_clients(request: Request) -> ServiceClients:
    return request.app.state.clients


def get_dispatcher(request: Request) -> JobDispatcher:
    return request.app.state.dispatcher


def get_current_user_id(
    authorization: Optional[str] = Header(None),
    clients: ServiceClients = Depends(get_clients),
) -> str:
    """
    User id from the bearer token.

    Usage:
        @api_router.get("/protected")
        def protected_route(user_id: str = Depends(get_current_user_id)):
            ...
    """
    return clients.verifier.user_id_from_header(authorization)
