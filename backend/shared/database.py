"""
Supabase client for the credential store.

The backend only ever talks to Supabase with the service role, since
user records (including password hashes) must never be exposed through RLS.
"""

from typing import Optional
from supabase import create_client, Client

from .config import Settings, get_settings

# One client per process, built from the first settings seen
_service_client: Optional[Client] = None


def get_supabase_client(settings: Optional[Settings] = None) -> Client:
    """
    Get the service-role Supabase client.

    Args:
        settings: Settings to build the client from on first use.
            Defaults to the process settings.

    Raises:
        RuntimeError: If SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY is not set
    """
    global _service_client

    if _service_client is None:
        settings = settings or get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. Set SUPABASE_URL and "
                "SUPABASE_SERVICE_ROLE_KEY to use CREDENTIAL_BACKEND=supabase."
            )
        _service_client = create_client(settings.supabase_url, settings.supabase_service_role_key)

    return _service_client


def reset_client_cache() -> None:
    """Drop the cached client so the next call builds a new one."""
    global _service_client
    _service_client = None
