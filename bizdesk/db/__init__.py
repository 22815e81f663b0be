"""
Database access layer for the BizDesk backend.

Persistence goes through Supabase (PostgREST). Schemas, migrations and
indexes live with the database; this package only hands out the client.
"""

from .client import get_supabase_client

__all__ = ["get_supabase_client"]
