"""Authentication context helpers."""

from dataclasses import dataclass
from typing import Any

import structlog

from sespress.utils.exceptions import ForbiddenError, UnauthorizedError

logger = structlog.get_logger()


@dataclass
class AuthContext:
    """Authentication context extracted from an API Gateway event."""

    user_id: str
    email: str | None = None
    is_admin: bool = False


def get_auth_context(event: dict[str, Any]) -> AuthContext:
    """Extract authentication context from API Gateway event.

    Args:
        event: API Gateway event dict.

    Returns:
        AuthContext with user information.

    Raises:
        UnauthorizedError: If no user identity is present.
    """
    request_context = event.get("requestContext", {}) or {}
    authorizer = request_context.get("authorizer", {}) or {}

    # Lambda authorizer payload v2 nests the context
    context = authorizer.get("lambda", authorizer)

    user_id = context.get("userId") or context.get("user_id") or context.get("sub")
    if not user_id:
        logger.warning("No user ID in auth context")
        raise UnauthorizedError()

    is_admin = context.get("isAdmin", False) or context.get("is_admin", False)
    if isinstance(is_admin, str):
        is_admin = is_admin.lower() == "true"

    return AuthContext(
        user_id=user_id,
        email=context.get("email"),
        is_admin=bool(is_admin),
    )


def require_admin(auth: AuthContext, action: str = "manage_settings") -> None:
    """Ensure the caller may manage mail settings.

    Raises:
        ForbiddenError: If the caller is not an admin.
    """
    if not auth.is_admin:
        logger.warning("Admin access denied", user_id=auth.user_id, action=action)
        raise ForbiddenError(
            message="Only administrators can manage mail settings",
            action=action,
        )
