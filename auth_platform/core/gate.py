"""
Bearer-token gate for protected routes.

`AuthGate` is a FastAPI dependency. Put it on a router
(`APIRouter(dependencies=[Depends(gate)])`) or on a single route; when the
`Authorization` header is missing or the token does not verify, it raises
AuthorizationError and the route handler never runs. On success the claims
are stored on `request.state.claims` and returned.
"""
import logging
from typing import Optional

from fastapi import Header, Request

from .claims import Claims
from .errors import AuthorizationError
from .tokens import INVALID_TOKEN_MESSAGE, verify_token

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"


def parse_authorization_header(value: Optional[str]) -> str:
    """
    Extract the token from an `Authorization: Bearer <token>` header value.

    Exactly two space-separated parts are accepted, the first being the
    literal scheme `Bearer`. Anything else is rejected rather than guessed at,
    with the same message a bad token gets.
    """
    if not value:
        logger.debug("Rejected request: no Authorization header")
        raise AuthorizationError(INVALID_TOKEN_MESSAGE)

    parts = value.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME or not parts[1].strip():
        logger.debug("Rejected request: Authorization header is not 'Bearer <token>'")
        raise AuthorizationError(INVALID_TOKEN_MESSAGE)

    return parts[1]


class AuthGate:
    """Verifies the bearer token of each request against a fixed secret."""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("AuthGate needs a non-empty signing secret")
        self._secret = secret

    def verify(self, authorization: Optional[str]) -> Claims:
        token = parse_authorization_header(authorization)
        return verify_token(token, self._secret)

    async def __call__(
        self,
        request: Request,
        authorization: Optional[str] = Header(default=None, alias="Authorization"),
    ) -> Claims:
        claims = self.verify(authorization)
        request.state.claims = claims
        return claims
