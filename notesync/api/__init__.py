# API module exports
from notesync.api import health
from notesync.api.base import api_router

__all__ = ["health", "api_router"]
