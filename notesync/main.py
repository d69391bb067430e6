"""Notesync application entry point (`uvicorn notesync.main:app`)"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notesync.api.base import api_router
from notesync.config import Settings, get_settings
from notesync.infra.supabase import reset_supabase_client

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{app.title} {app.version} starting")
    yield
    # Live sessions release their own channels; drop the shared client
    reset_supabase_client()
    logger.info(f"{app.title} stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(
        title="Notesync API",
        description="Real-time notes and checklists backed by Supabase",
        version=VERSION,
        lifespan=lifespan,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.include_router(api_router)

    @application.get("/")
    def read_root():
        return {
            "message": application.title,
            "docs": "/docs",
            "live": "/api/notes/live",
            "version": VERSION,
        }

    return application


app = create_app()
