from fastapi import APIRouter
from notesync.api import health
from notesync.features.notes import router as notes_router

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health.router)
api_router.include_router(notes_router)
