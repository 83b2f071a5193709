"""
Application lifecycle management.

Opens the certificate storage once at startup and shares it through
app.state for the lifetime of the process.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from certvault.config import get_settings
from certvault.infrastructure import InfrastructureFactory


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Storage construction errors propagate and abort startup.

    Args:
        app: FastAPI application instance
    """
    logger.info("Starting certvault...")

    factory = InfrastructureFactory.from_settings(get_settings())
    storage = await factory.create_storage()
    app.state.storage = storage

    logger.info(f"Certificate storage ready: {storage.describe()}")

    yield

    logger.info("Shutting down certvault...")
    storage.cache.close()
