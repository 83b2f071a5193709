"""
Main FastAPI application entry point.
"""

from certvault.application import create_app
from certvault.config import get_settings
from certvault.core.logging import configure_logger, intercept_standard_logging

configure_logger()

# Intercept logs from boto3, uvicorn and other libraries
intercept_standard_logging()

app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "certvault.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning",
    )
