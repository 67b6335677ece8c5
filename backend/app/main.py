#backend/app/main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.app.api.interview_routes import interview_router
from backend.app.api.networking_routes import networking_router
from backend.app.api.routes import api_router
from backend.app.config import Settings, settings as default_settings
from backend.app.core.clients import ServiceClients
from backend.app.core.errors import AppError
from backend.app.core.scheduler import JobDispatcher

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
    )


class FinPrepApp:
    def __init__(
        self,
        settings: Settings = default_settings,
        clients: Optional[ServiceClients] = None,
        dispatcher: Optional[JobDispatcher] = None,
    ):
        self.settings = settings
        self._clients = clients
        self._dispatcher = dispatcher
        self.app = FastAPI(
            title="FinPrep API",
            description="Resume analysis jobs, mock interviews and networking messages for finance candidates.",
            version="0.3.0",
            lifespan=self._lifespan,
        )
        self._configure_cors()
        self._register_error_handlers()
        self.include_routers()

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        owned = self._clients is None
        clients = self._clients or ServiceClients.build(self.settings)
        dispatcher = self._dispatcher
        if dispatcher is None:
            from backend.app.core.async_queue import AsyncJobQueueCelery
            dispatcher = AsyncJobQueueCelery()
        app.state.clients = clients
        app.state.dispatcher = dispatcher
        logger.info("API started (model=%s)", self.settings.full_model_id())
        try:
            yield
        finally:
            if owned:
                clients.close()

    def _configure_cors(self):
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.cors_origins(),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _register_error_handlers(self):
        @self.app.exception_handler(AppError)
        async def _app_error(request: Request, exc: AppError):
            if exc.status_code >= 500:
                logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.details or exc.message)
            return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

        @self.app.exception_handler(RequestValidationError)
        async def _validation_error(request: Request, exc: RequestValidationError):
            missing = [".".join(str(p) for p in e["loc"][1:]) for e in exc.errors()]
            return JSONResponse(
                status_code=400,
                content={"error": "Missing or invalid fields", "details": ", ".join(m for m in missing if m)},
            )

        @self.app.exception_handler(Exception)
        async def _unhandled(request: Request, exc: Exception):
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(
                status_code=500,
                content={"error": "An unexpected error occurred", "details": str(exc)},
            )

    def include_routers(self):
        self.app.include_router(api_router)
        self.app.include_router(interview_router)
        self.app.include_router(networking_router)

def get_app():
    """Entrypoint for ASGI"""
    configure_logging(default_settings.LOG_LEVEL)
    return FinPrepApp().app

# Run with 'uvicorn backend.app.main:app'
app = get_app()
