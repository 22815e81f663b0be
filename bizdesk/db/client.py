"""
Supabase client factory.

The BizDesk API is a single-tenant back office: every request works against
the same tables, so the client is created with the server-side secret key
and shared for the lifetime of the process.

Table layout (owned by the database, not by this code):
- toga_departments, toga_rentals, toga_payments
- categories, products, inventories, product_transactions
- orders, order_items, payments
"""

import logging
from functools import lru_cache

from bizdesk.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """
    Return the process-wide Supabase client.

    Returns:
        A Supabase client authenticated with SUPABASE_SECRET_KEY.

    Raises:
        ValueError: If SUPABASE_URL or SUPABASE_SECRET_KEY is missing.

    Example:
        >>> client = get_supabase_client()
        >>> result = client.table("categories").select("*").execute()
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_SECRET_KEY:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_SECRET_KEY must be configured "
            "before the database can be reached."
        )

    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_SECRET_KEY
    )

    logger.debug("Created Supabase client for %s", settings.SUPABASE_URL)

    return client
