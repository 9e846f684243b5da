"""
Claims carried inside an access token.

Claims are never stored. The auth service builds them from a user and the
user's group memberships at login; the gate rebuilds them from a verified
token. Group membership changes after login show up only on the next login.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

# Reserved id of the open group every new user is enrolled into.
DEFAULT_GROUP_ID = "00000000-0000-0000-0000-000000000000"
DEFAULT_GROUP_NAME = "All users"


class Claims(BaseModel):
    """Verified identity attached to a request."""

    user_id: str = Field(..., min_length=1)
    username: str
    groups: List[str] = Field(default_factory=list)
    iat: int
    exp: int

    @classmethod
    def for_user(
        cls,
        user_id: str,
        username: str,
        groups: List[str],
        ttl: timedelta,
        now: Optional[datetime] = None,
    ) -> "Claims":
        issued_at = now or datetime.now(timezone.utc)
        return cls(
            user_id=user_id,
            username=username,
            groups=list(groups),
            iat=int(issued_at.timestamp()),
            exp=int((issued_at + ttl).timestamp()),
        )
