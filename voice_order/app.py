"""
Application factory for the voice order engine HTTP service.

Run locally:
    uvicorn voice_order.app:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .logging_config import setup_logging
from .routes import catalog_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Voice Order Engine API",
        description="Menu resolution, dietary safety and recognizer vocabulary for voice ordering",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(catalog_router)

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    logger.info("Voice order engine application created")
    return app


setup_logging()
app = create_app()
