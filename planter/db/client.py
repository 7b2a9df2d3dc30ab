"""
Supabase client factory with RLS enforcement.

This module provides Supabase clients for the service layer.

RULES:
1. User requests use the publishable key plus the user's JWT so Row Level
   Security scopes every query to auth.uid()
2. Anonymous requests (questionnaire submission without a token) use the
   publishable key alone; RLS policies must allow the anonymous inserts
3. The service_role client is ONLY for background jobs that need
   cross-user access (the watering reminder sweep)
"""

import logging
from typing import Optional

from planter.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def get_supabase_client(access_token: Optional[str] = None) -> Client:
    """
    Create a Supabase client, authenticated as the user when a token is given.

    Args:
        access_token: The user's JWT access token from Supabase Auth, or None
                      for anonymous access.

    Returns:
        A Supabase client subject to RLS policies.

    Example:
        >>> client = get_supabase_client(auth_user.access_token)
        >>> result = client.table("chat_sessions").select("*").execute()
    """
    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_PUBLISHABLE_KEY
    )

    if access_token:
        # The token's 'sub' claim is what auth.uid() resolves to in RLS policies
        client.auth.set_session(access_token, access_token)
        logger.debug("Created authenticated Supabase client with user token (RLS enforced)")
    else:
        logger.debug("Created anonymous Supabase client (RLS enforced)")

    return client


def get_service_role_client() -> Client:
    """
    Create a Supabase client with service_role privileges.

    WARNING: This bypasses RLS and must ONLY be used by background jobs.
    NEVER use this for user-initiated requests.

    Raises:
        ValueError: If SUPABASE_SECRET_KEY is not configured.
    """
    if not settings.SUPABASE_SECRET_KEY:
        raise ValueError(
            "SUPABASE_SECRET_KEY is not configured. "
            "Background jobs need it for cross-user access."
        )

    return create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_SECRET_KEY
    )
