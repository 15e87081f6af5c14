"""Supabase client for the interview store.

Every table access goes through ``interview_engine.db.entities``, which is the
only caller of ``get_supabase``.
"""

from functools import lru_cache

from supabase import Client, ClientOptions, create_client

from interview_engine.core.config import get_settings


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """
    Get the shared Supabase client, bound to the configured schema.

    Returns:
        Supabase client authenticated with the service role key

    Raises:
        RuntimeError: If settings are missing or the client cannot be created
    """
    try:
        settings = get_settings()
        return create_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY,
            options=ClientOptions(schema=settings.SUPABASE_SCHEMA),
        )
    except Exception as e:
        raise RuntimeError(f"Failed to initialize Supabase client for the interview store: {e}") from e
