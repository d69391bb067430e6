"""Health check and configuration status endpoints"""

from fastapi import APIRouter, Depends

from notesync.config import Settings, get_settings

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("/config")
async def get_config_status(settings: Settings = Depends(get_settings)):
    """
    Report which connection parameters are set.

    Values are never returned. Missing parameters are not an error here;
    they surface as a subscription failure once a client connects.
    """
    present = settings.connection_status()
    missing = [name for name, is_set in present.items() if not is_set]

    return {
        "status": "incomplete" if missing else "configured",
        "parameters": present,
        "missing": missing,
        "store_url_set": settings.store_url is not None,
        "notes_table": settings.notes_table,
    }


@router.get("/")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": "notesync",
    }
