"""API dependencies for caller resolution and common utilities.

Authentication happens upstream: the gateway's auth layer verifies the
session or token and forwards the resolved user id in ``X-User-Id``. This
module only loads that user and enforces account status and admin role.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from gateway_checkin.config import Settings, get_settings
from gateway_checkin.logging_config import bind_context
from gateway_checkin.models.user import User
from gateway_checkin.utils.db import get_db

USER_ID_HEADER = "X-User-Id"


def _auth_error(status_code: int, code: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={
            "error": {
                "code": code,
                "message": message,
                "details": {},
            }
        },
    )


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    x_user_id: Annotated[str | None, Header(alias=USER_ID_HEADER)] = None,
) -> User:
    """Load the caller forwarded by the upstream auth layer.

    Raises:
        HTTPException: 401 when the header is missing, malformed or names
            an unknown user; 403 when the account is disabled
    """
    if not x_user_id:
        raise _auth_error(
            status.HTTP_401_UNAUTHORIZED,
            "AUTH_REQUIRED",
            "Authentication required",
        )

    try:
        user_id = int(x_user_id)
    except ValueError:
        raise _auth_error(
            status.HTTP_401_UNAUTHORIZED,
            "AUTH_INVALID_USER",
            "Invalid user id",
        )

    user = await db.get(User, user_id)
    if user is None:
        raise _auth_error(
            status.HTTP_401_UNAUTHORIZED,
            "AUTH_USER_NOT_FOUND",
            "User not found",
        )

    if not user.is_enabled:
        raise _auth_error(
            status.HTTP_403_FORBIDDEN,
            "AUTH_ACCOUNT_DISABLED",
            "Account is disabled",
        )

    bind_context(user_id=user.id)
    return user


async def get_current_admin(
    user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Require an admin (or root) caller."""
    if not user.is_admin:
        raise _auth_error(
            status.HTTP_403_FORBIDDEN,
            "AUTH_ADMIN_REQUIRED",
            "Admin privileges required",
        )
    return user


# Type aliases for cleaner annotations
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentAdmin = Annotated[User, Depends(get_current_admin)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
