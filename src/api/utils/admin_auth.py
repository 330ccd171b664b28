"""
Admin API Key Authentication

Guards the maintenance endpoints called by the sweep scheduler.
"""

import secrets

from fastapi import Header, status

from libs.result import Error
from src.api.error import ClientError
from src.domain.errors import ErrorCode
from config import ApplicationConfig


async def verify_admin_api_key(x_admin_api_key: str = Header(None)):
    """
    Verify the X-Admin-API-Key header against the configured key.

    Service-to-service auth, separate from user JWTs.

    Raises:
        ClientError: 401 if key is missing or invalid
    """
    if not x_admin_api_key:
        raise ClientError(
            Error(ErrorCode.UNAUTHORIZED, "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    if not secrets.compare_digest(x_admin_api_key, ApplicationConfig.ADMIN_API_KEY):
        raise ClientError(
            Error(ErrorCode.INVALID_API_KEY, "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
