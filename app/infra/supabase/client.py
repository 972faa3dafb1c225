"""Supabase client singleton"""
from typing import Optional

from supabase import Client, create_client  # type: ignore

from app import config

_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get or create the service-role Supabase client singleton"""
    global _supabase_client

    if _supabase_client is None:
        url = config.SUPABASE_URL
        key = config.SUPABASE_SERVICE_ROLE_KEY

        if not url or not key:
            raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        _supabase_client = create_client(url, key)

    return _supabase_client


def create_auth_client() -> Client:
    """
    Create a fresh anon-key client for end-user auth calls.

    Sign-in stores the session on the client, so each auth operation gets
    its own client instead of sharing the service-role singleton.
    """
    url = config.SUPABASE_URL
    key = config.SUPABASE_ANON_KEY or config.SUPABASE_SERVICE_ROLE_KEY

    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")

    return create_client(url, key)
