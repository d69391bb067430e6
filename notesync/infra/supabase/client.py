"""Supabase client singleton"""
from typing import Optional

from supabase import AsyncClient, acreate_client  # type: ignore

from notesync.config import get_settings

_supabase_client: Optional[AsyncClient] = None


async def get_supabase_client() -> AsyncClient:
    """Get or create the async Supabase client singleton.

    The connection parameters are passed through as-is; the client library
    raises when they are missing or malformed.
    """
    global _supabase_client

    if _supabase_client is None:
        settings = get_settings()
        _supabase_client = await acreate_client(settings.store_url, settings.api_key)

    return _supabase_client


def reset_supabase_client():
    """Reset the Supabase client singleton (useful for testing)"""
    global _supabase_client
    _supabase_client = None
