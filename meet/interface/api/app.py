"""FastAPI application."""

from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from meet.config import Settings
from meet.interface.api.routes import (
    auth,
    health,
    invitations,
    live,
    meetings,
    users,
)
from meet.interface.error import register_error_handlers
from meet.util.di.container import create_container, setup_di
from meet.util.observability import instrument_fastapi, instrument_httpx


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Closes APP-scoped resources: engine, change feed listener
    await app.state.dishka_container.close()


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Logfire should be configured before calling this function; start_app.py
    handles this in production.

    Args:
        container: DI container to use; defaults to the production container
    """
    settings = Settings()

    instrument_httpx()

    app_instance = FastAPI(
        title="Meet API",
        description="Backend API for Meet - propose meetings to other users and track the ones you have scheduled",
        version="0.1.0",
        lifespan=lifespan,
    )

    instrument_fastapi(app_instance)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:5173",  # Vite default
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["Content-Type", "Accept", "Origin", "X-Requested-With"],
        max_age=600,
    )

    setup_di(app_instance, container or create_container())
    register_error_handlers(app_instance)

    app_instance.include_router(health.router)
    app_instance.include_router(auth.router)
    app_instance.include_router(users.router)
    app_instance.include_router(invitations.router)
    app_instance.include_router(meetings.router)
    app_instance.include_router(live.router)

    return app_instance
