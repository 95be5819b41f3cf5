"""FastAPI application setup."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..app import Application
from .routes import create_health_router, create_proxy_router


def create_fastapi_app(application: Application | None = None) -> FastAPI:
    """Create and configure FastAPI application around an Application."""
    application = application or Application()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan."""
        await application.start()
        yield
        await application.stop()

    fastapi_app = FastAPI(
        title="Qaku Cache API",
        description="Read-through proxy for the Codex node behind the Qaku cache",
        version="0.1.0",
        lifespan=lifespan,
    )
    fastapi_app.state.application = application

    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=list(application.settings.cors_origins),
        allow_methods=["GET", "OPTIONS"],
        allow_headers=[
            "Origin",
            "DNT",
            "User-Agent",
            "X-Requested-With",
            "If-Modified-Since",
            "Cache-Control",
            "Content-Type",
            "Range",
        ],
        expose_headers=["Content-Length"],
    )

    fastapi_app.include_router(create_proxy_router(application))
    fastapi_app.include_router(create_health_router(application))

    return fastapi_app
