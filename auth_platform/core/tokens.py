"""
Signing and verification of access tokens.

Both functions take the secret as an argument; the services read it once
from settings and pass it in, so nothing in this module holds key material.
"""
import logging
from datetime import timedelta

import jwt
from pydantic import ValidationError as PydanticValidationError

from .claims import Claims
from .errors import AuthorizationError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["user_id", "iat", "exp"]

# Issuer and verifier are separate processes; tolerate small clock drift on iat/exp.
CLOCK_SKEW_LEEWAY = timedelta(seconds=30)

# One message for every verification failure. The precise reason is logged.
INVALID_TOKEN_MESSAGE = "Invalid or expired token"


def issue_token(claims: Claims, secret: str) -> str:
    """
    Sign claims into a compact JWT.

    Args:
        claims: Claims to embed
        secret: HMAC key shared with every verifying service

    Returns:
        Encoded token string
    """
    if not secret:
        raise ValueError("Refusing to sign a token with an empty secret")
    return jwt.encode(claims.model_dump(), secret, algorithm=ALGORITHM)


def verify_token(token: str, secret: str) -> Claims:
    """
    Verify a token and return the claims it carries.

    The algorithm named in the token header is checked against ALGORITHM
    before the signature is looked at, so a token cannot pick its own
    verification method.

    Raises:
        AuthorizationError: on any malformed, tampered, foreign or expired token
    """
    if not token or not secret:
        raise AuthorizationError(INVALID_TOKEN_MESSAGE)

    try:
        header = jwt.get_unverified_header(token)
    except jwt.PyJWTError as exc:
        logger.debug("Rejected token: unreadable header (%s)", exc)
        raise AuthorizationError(INVALID_TOKEN_MESSAGE) from exc

    if header.get("alg") != ALGORITHM:
        logger.debug("Rejected token: unexpected signing method %r", header.get("alg"))
        raise AuthorizationError(INVALID_TOKEN_MESSAGE)

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": REQUIRED_CLAIMS},
            leeway=CLOCK_SKEW_LEEWAY,
        )
    except jwt.ExpiredSignatureError as exc:
        logger.debug("Rejected token: expired")
        raise AuthorizationError(INVALID_TOKEN_MESSAGE) from exc
    except jwt.PyJWTError as exc:
        logger.debug("Rejected token: %s", exc)
        raise AuthorizationError(INVALID_TOKEN_MESSAGE) from exc

    try:
        return Claims(**payload)
    except PydanticValidationError as exc:
        logger.debug("Rejected token: malformed claims (%s)", exc)
        raise AuthorizationError(INVALID_TOKEN_MESSAGE) from exc
