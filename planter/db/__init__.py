"""
Database access layer for Planter backend.

All database operations MUST:
- Respect Row Level Security (RLS) for user requests
- Use the service_role client only from background jobs

DO NOT define table schemas, migrations, or RLS policies here.

Includes:
- Supabase client initialization (user, anonymous, service_role)
"""

from .client import get_service_role_client, get_supabase_client

__all__ = ["get_supabase_client", "get_service_role_client"]
