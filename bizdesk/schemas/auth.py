"""
Pydantic schemas for the current-user endpoint.

Identity comes from the verified Supabase token; nothing is read from the
database.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class CurrentUserResponse(BaseModel):
    """
    Response for GET /api/user.

    Used by the web shell on boot to decide whether to render navigation.
    """
    user_id: str = Field(..., description="User UUID (from JWT 'sub' claim)")
    email: Optional[str] = Field(None, description="Email claim, if present")
    name: Optional[str] = Field(None, description="Display name from user_metadata")
    role: Optional[str] = Field(None, description="Shop role ('admin' or 'staff')")
    is_admin: bool = Field(..., description="True when role is admin (case-insensitive)")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Raw user_metadata")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "38f7d540-23fa-497a-8df2-3ab9cbe13da5",
                    "email": "cashier@example.com",
                    "name": "Ana Cruz",
                    "role": "admin",
                    "is_admin": True,
                    "metadata": {"name": "Ana Cruz"}
                }
            ]
        }
    }
