"""Current-user resolution and configuration access checks."""

import logging

from fastapi import HTTPException, Request

from timeline_api.config import settings

logger = logging.getLogger(__name__)


def get_current_user(request: Request) -> str | None:
    """Return the user named in the trusted user header, if any."""
    user = (request.headers.get(settings.user_header) or "").strip()
    return user or None


def has_config_permission(user: str | None) -> bool:
    """Whether a user may add or remove timeline child configurations."""
    if user is None:
        return settings.allow_anonymous_config
    return user in settings.config_admin_users


def require_config_permission(request: Request) -> str | None:
    """Dependency that rejects configuration writes from unauthorized users."""
    user = get_current_user(request)
    if not has_config_permission(user):
        logger.warning(f"Configuration change denied for user {user!r}")
        raise HTTPException(
            status_code=403,
            detail="You do not have permission to configure the timeline.",
        )
    return user
