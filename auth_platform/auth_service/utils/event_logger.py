"""
Event logger utility for authentication events.
"""
from datetime import datetime, timezone
from typing import Optional
from fastapi import Request
import logging

logger = logging.getLogger(__name__)


ALLOWED_EVENT_TYPES = {
    "register",
    "login_success",
    "login_failure",
    "user_deleted",
}


def client_ip(request: Request) -> Optional[str]:
    """Client address, falling back to the first X-Forwarded-For hop."""
    if request.client and request.client.host:
        return request.client.host

    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded.split(",")[0].strip()
    return None


def log_auth_event(
    event_type: str,
    request: Request,
    user_id: Optional[str] = None,
    login: Optional[str] = None,
) -> None:
    """
    Write one line describing an authentication event.

    Args:
        event_type: One of: register, login_success, login_failure, user_deleted
        request: FastAPI Request object
        user_id: Id of the user involved, when known
        login: Login that was presented, when relevant

    Raises:
        ValueError: If event_type is invalid
    """
    if event_type not in ALLOWED_EVENT_TYPES:
        raise ValueError(
            f"Invalid event_type '{event_type}'. Must be one of: {', '.join(sorted(ALLOWED_EVENT_TYPES))}"
        )

    level = logging.WARNING if event_type == "login_failure" else logging.INFO
    logger.log(
        level,
        "AUTH %s user_id=%s login=%s ip=%s user_agent=%s timestamp=%s",
        event_type,
        user_id,
        login,
        client_ip(request),
        request.headers.get("user-agent"),
        datetime.now(timezone.utc).isoformat(),
    )
