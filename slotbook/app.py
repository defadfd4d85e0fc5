import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from slotbook import __version__
from slotbook.config import Settings, settings as default_settings
from slotbook.errors import SlotbookError
from slotbook.logging_config import configure_logging
from slotbook.repositories import Repositories, build_repositories
from slotbook.routers import appointments, doctors, patients
from slotbook.services import Clock, build_services, local_clock

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    repositories: Optional[Repositories] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    """
    Build the API. Repositories and clock default to the ones named by the
    settings; tests pass their own.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Connects the store and wires the services ONCE."""
        configure_logging(settings.LOG_LEVEL)
        repos = repositories or build_repositories(settings)
        app.state.services = build_services(repos, clock or local_clock(settings.TIMEZONE))
        logger.info(
            "slotbook %s started (storage=%s, timezone=%s)",
            __version__, settings.STORAGE_BACKEND, settings.TIMEZONE,
        )
        yield
        del app.state.services

    app = FastAPI(
        title="Slotbook API",
        description="Provider schedules, slot booking and appointment history.",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS Middleware Setup
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SlotbookError)
    async def slotbook_error_handler(request: Request, exc: SlotbookError):
        if exc.status_code >= 500:
            logger.error("%s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(doctors.router)
    app.include_router(patients.router)
    app.include_router(appointments.router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
