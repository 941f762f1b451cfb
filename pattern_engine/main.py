"""
Pattern Engine Service - FastAPI Application

Serves the pattern analysis and recommendation engine over HTTP:
- POST /coach/analyze        ranked recommendations
- POST /coach/patterns       per-category patterns
- POST /coach/insights       personalized insight text
- GET  /coach/categories     categories with dedicated strategies
- GET  /coach/learning/*     learning history statistics and insight text

The engine performs no I/O; this service is a thin shell around one
engine instance per process.

Run with:
    python -m pattern_engine.main
"""

import logging
import os
from datetime import datetime
from typing import Optional

from fastapi import FastAPI

from . import __version__, MODEL_VERSION
from .config import EngineConfig, load_config
from .engine import PatternEngine
from .router import router as coach_router, set_engine, get_engine

# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
CONFIG = load_config()

# -----------------------------------------------------------------------------
# Logging Configuration
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=getattr(logging, CONFIG.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("pattern_engine_service")

SERVICE_NAME = "Pattern Engine - Behavioral Analysis & Recommendations"


def create_app(config: Optional[EngineConfig] = None) -> FastAPI:
    """Build the FastAPI application around a fresh engine."""
    config = config or CONFIG
    set_engine(PatternEngine(config=config))

    application = FastAPI(
        title=SERVICE_NAME,
        version=__version__,
    )
    application.include_router(coach_router)

    @application.get("/")
    async def root():
        """Service info."""
        return {
            "service": SERVICE_NAME,
            "status": "running",
            "version": __version__,
            "model_version": MODEL_VERSION,
        }

    @application.get("/health")
    async def health():
        """Health check with engine state."""
        engine = get_engine()
        return {
            "status": "healthy",
            "timestamp": datetime.utcnow().isoformat(),
            "learning_records": engine.store.count,
            "categories": engine.registry.categories,
            "config": engine.config.to_dict(),
        }

    logger.info(f"{SERVICE_NAME} v{__version__} initialized")
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=os.getenv("PATTERN_ENGINE_HOST", "0.0.0.0"),
        port=int(os.getenv("PATTERN_ENGINE_PORT", "8100")),
    )
