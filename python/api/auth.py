"""
Authentication Module

Resolves the calling user from the X-User-ID header set by the upstream
gateway.
"""

import os

from fastapi import Header, HTTPException, status

DEV_USER_ID = "dev"


async def get_current_user_id(
    x_user_id: str | None = Header(None, alias="X-User-ID"),
) -> str:
    """Get current user ID from request headers.

    Args:
        x_user_id: User ID from header

    Returns:
        User ID

    Raises:
        HTTPException: If the header is missing outside development mode
    """
    if x_user_id:
        return x_user_id

    # Development mode: allow requests without a user header
    if os.getenv("ENVIRONMENT", "development") == "development":
        return DEV_USER_ID

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Missing X-User-ID header",
    )
