"""
FastAPI application factory for the Apiary Sandbox API.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apiary.api.sessions import SessionManager
from apiary.api.routers import colony, simulation

# Load .env: project root first, then CWD
_project_root = Path(__file__).resolve().parents[3]  # src/apiary/api/app.py -> project root
load_dotenv(_project_root / ".env")
load_dotenv(Path.cwd() / ".env")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    application = FastAPI(
        title="Apiary Sandbox API",
        description="REST API for the Apiary colony simulation",
        version="0.1.0",
    )

    origins = os.environ.get("APIARY_CORS_ORIGINS", "*").split(",")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in origins if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.state.session_manager = SessionManager()

    application.include_router(simulation.router, prefix="/api/simulation", tags=["simulation"])
    application.include_router(colony.router, prefix="/api/colony", tags=["colony"])

    @application.get("/api/health")
    def health_check():
        return {"status": "ok"}

    return application


app = create_app()
