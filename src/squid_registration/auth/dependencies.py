"""Admin authentication dependency for FastAPI"""

import secrets

from fastapi import Request

from squid_registration.logging_config import get_logger

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def is_admin_request(request: Request) -> bool:
    """
    Check the Authorization header against the configured admin token.

    Reads the header manually rather than through HTTPBearer so a missing
    header yields False instead of FastAPI's own 403.

    Args:
        request: FastAPI Request object

    Returns:
        True only if ADMIN_TOKEN is configured and the request carries
        "Authorization: Bearer <ADMIN_TOKEN>"
    """
    expected_token = request.app.state.config.get("admin_token")
    if not expected_token:
        logger.warning("Admin request rejected: ADMIN_TOKEN is not configured")
        return False

    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return False

    token = auth_header[len(BEARER_PREFIX) :]
    return secrets.compare_digest(token.encode(), expected_token.encode())
