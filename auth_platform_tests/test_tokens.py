"""Tests for token issuing and verification."""
import base64
import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from auth_platform.core.claims import DEFAULT_GROUP_ID, Claims
from auth_platform.core.errors import AuthorizationError
from auth_platform.core.tokens import ALGORITHM, INVALID_TOKEN_MESSAGE, issue_token, verify_token

from .helpers import OTHER_SECRET, TEST_SECRET, make_token

USER_ID = "6a1f3c52-2b7e-4d0a-9f57-1c2d3e4f5a6b"


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _payload(**overrides) -> dict:
    now = int(datetime.now(timezone.utc).timestamp())
    payload = {"user_id": USER_ID, "username": "bob", "groups": [DEFAULT_GROUP_ID], "iat": now, "exp": now + 3600}
    payload.update(overrides)
    return payload


def test_issued_token_verifies_to_same_claims():
    claims = Claims.for_user(USER_ID, "bob", [DEFAULT_GROUP_ID], timedelta(hours=24))
    token = issue_token(claims, TEST_SECRET)

    verified = verify_token(token, TEST_SECRET)

    assert verified == claims
    assert DEFAULT_GROUP_ID in verified.groups


def test_token_payload_shape():
    token = make_token(user_id=USER_ID, username="bob", groups=[DEFAULT_GROUP_ID], ttl=timedelta(hours=24))

    header = jwt.get_unverified_header(token)
    payload = jwt.decode(token, TEST_SECRET, algorithms=["HS256"])

    assert header["alg"] == "HS256"
    assert ALGORITHM == "HS256"
    assert payload["user_id"] == USER_ID
    assert payload["username"] == "bob"
    assert payload["groups"] == [DEFAULT_GROUP_ID]
    assert payload["exp"] - payload["iat"] == 24 * 3600


def test_expired_token_rejected_even_with_valid_signature():
    issued = datetime.now(timezone.utc) - timedelta(days=2)
    token = make_token(user_id=USER_ID, now=issued, ttl=timedelta(hours=24))

    with pytest.raises(AuthorizationError) as exc_info:
        verify_token(token, TEST_SECRET)
    assert exc_info.value.message == INVALID_TOKEN_MESSAGE


def test_token_signed_with_other_secret_rejected():
    token = make_token(user_id=USER_ID, secret=OTHER_SECRET)

    with pytest.raises(AuthorizationError) as exc_info:
        verify_token(token, TEST_SECRET)
    assert exc_info.value.message == INVALID_TOKEN_MESSAGE


def test_token_signed_with_other_hmac_algorithm_rejected():
    token = jwt.encode(_payload(), TEST_SECRET, algorithm="HS512")

    with pytest.raises(AuthorizationError):
        verify_token(token, TEST_SECRET)


def test_unsigned_token_rejected():
    token = f"{_b64({'alg': 'none', 'typ': 'JWT'})}.{_b64(_payload())}."

    with pytest.raises(AuthorizationError):
        verify_token(token, TEST_SECRET)


def test_header_claiming_hs256_over_tampered_payload_rejected():
    good = make_token(user_id=USER_ID)
    header, _, signature = good.split(".")
    forged = f"{header}.{_b64(_payload(user_id='someone-else'))}.{signature}"

    with pytest.raises(AuthorizationError):
        verify_token(forged, TEST_SECRET)


@pytest.mark.parametrize("missing", ["exp", "user_id", "iat"])
def test_token_missing_required_claim_rejected(missing):
    payload = _payload()
    del payload[missing]
    token = jwt.encode(payload, TEST_SECRET, algorithm="HS256")

    with pytest.raises(AuthorizationError):
        verify_token(token, TEST_SECRET)


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c", "....."])
def test_garbage_rejected_with_generic_message(token):
    with pytest.raises(AuthorizationError) as exc_info:
        verify_token(token, TEST_SECRET)
    assert exc_info.value.message == INVALID_TOKEN_MESSAGE


def test_issue_token_refuses_empty_secret():
    claims = Claims.for_user(USER_ID, "bob", [], timedelta(hours=1))
    with pytest.raises(ValueError):
        issue_token(claims, "")


def test_small_clock_skew_between_services_tolerated():
    # Issuer's clock a few seconds ahead of the verifier's
    token = make_token(user_id=USER_ID, now=datetime.now(timezone.utc) + timedelta(seconds=5))

    assert verify_token(token, TEST_SECRET).user_id == USER_ID


def test_token_issued_far_in_the_future_rejected():
    token = make_token(user_id=USER_ID, now=datetime.now(timezone.utc) + timedelta(minutes=10))

    with pytest.raises(AuthorizationError):
        verify_token(token, TEST_SECRET)
