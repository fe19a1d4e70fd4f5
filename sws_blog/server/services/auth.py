"""
Admin API guard.

Every admin route requires ``Authorization: Bearer <ADMIN_API_TOKEN>``.
When no token is configured the admin API rejects every request.
"""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Header, HTTPException, status

from sws_blog.core.logging_config import get_logger
from sws_blog.server.core.config import settings

logger = get_logger(__name__)


def token_matches(authorization: Optional[str], expected: Optional[str]) -> bool:
    if not expected or not authorization:
        return False
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return False
    return secrets.compare_digest(token.strip(), expected)


async def require_admin(authorization: Optional[str] = Header(default=None)) -> None:
    """FastAPI dependency rejecting requests without the admin bearer token."""
    if not token_matches(authorization, settings.admin.api_token):
        logger.debug("Rejected admin request with missing or invalid token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
