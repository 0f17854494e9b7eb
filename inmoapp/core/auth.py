"""
Auth utilities for the InmoApp API.

Session handling lives in the web tier; it forwards the authenticated
account id in the X-User-Id header.
"""
from fastapi import Header, HTTPException
from typing import Optional


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, description="Authenticated account id")
) -> str:
    """
    Extract current user ID from request headers.

    Raises:
        HTTPException 401: Missing authentication
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id.strip()
