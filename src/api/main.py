"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Must run before anything reads the environment
load_dotenv()

# main.py is at <root>/src/api/main.py; src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.dependencies import get_settings
from api.errors import register_exception_handlers
from api.middleware.request_logging import RequestLoggingMiddleware
from api.routes import auth, health, users
from adapter.mongodb.connection import close_client, get_mongodb_client
from adapter.mongodb.indexes import ensure_all_indexes
from utils.logging import setup_structured_logging
from utils.settings import Settings

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Account Service"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown logic."""
    settings = get_settings()
    setup_structured_logging(settings.log_level)

    client = get_mongodb_client(settings.mongo_url)
    if client:
        if ensure_all_indexes(client[settings.database_name]):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield

    close_client()


def create_app(settings: Settings) -> FastAPI:
    """Build the application with CORS configured from settings."""
    app = FastAPI(
        title=SERVICE_NAME,
        description="User accounts: registration, email verification, sessions, password reset",
        version=VERSION,
        lifespan=lifespan,
    )

    # Session cookies need credentialed CORS, which rules out a wildcard origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origin for origin in settings.cors_origins if origin != "*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": SERVICE_NAME,
            "version": VERSION,
            "status": "running"
        }

    return app


# Fails fast when JWT_SECRET_KEY is missing
app = create_app(get_settings())


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    # Requests are logged by RequestLoggingMiddleware
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )
