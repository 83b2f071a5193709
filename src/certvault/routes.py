"""
Routes registration for the FastAPI application.
"""

from fastapi import FastAPI

from certvault.api.v1.health.router import router as health_router


def register_routes(app: FastAPI) -> None:
    """
    Register all application routers.

    Args:
        app: FastAPI application instance
    """
    # Health check endpoints (no prefix, public)
    app.include_router(health_router)
