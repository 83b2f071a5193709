"""
FastAPI application factory.

Creates the service shell around the certificate storage.
"""

from fastapi import FastAPI

from certvault import __version__
from certvault.config import get_settings
from certvault.lifespan import lifespan
from certvault.routes import register_routes


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.project_name,
        description="Cached, optionally encrypted certificate storage on S3",
        version=__version__,
        lifespan=lifespan,
    )

    register_routes(app)

    return app
