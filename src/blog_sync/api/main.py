"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from blog_sync import __version__
from blog_sync.api.routers import export, git_pages
from blog_sync.config import get_settings
from blog_sync.config.logging import configure_logging
from blog_sync.core.exceptions import ConfigurationError


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.is_production,
    )

    # Services are lazily initialized on first request via dependencies

    yield

    # Cleanup
    if hasattr(app.state, "repo_factory"):
        await app.state.repo_factory.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="blog-sync",
        description="Blog export and git repository synchronization",
        version=__version__,
        debug=settings.debug,
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.include_router(git_pages.router, prefix="/api/v1", tags=["Git pages"])
    app.include_router(export.router, prefix="/api/v1", tags=["Export"])

    return app


def run() -> None:
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    if settings.api_workers != 1:
        # the repository lock lives in one process
        raise ConfigurationError(
            "api_workers must be 1",
            details={"api_workers": settings.api_workers},
        )
    uvicorn.run(
        "blog_sync.api.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.api_workers,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
