"""Tests for Authorization header parsing and the AuthGate dependency."""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from auth_platform.core.claims import Claims
from auth_platform.core.errors import AuthorizationError, register_exception_handlers
from auth_platform.core.gate import AuthGate, parse_authorization_header
from auth_platform.core.tokens import INVALID_TOKEN_MESSAGE

from .helpers import OTHER_SECRET, TEST_SECRET, bearer, make_token


@pytest.fixture
def gated_app():
    """A one-route app behind the gate that records whether the handler ran."""
    gate = AuthGate(TEST_SECRET)
    app = FastAPI()
    register_exception_handlers(app)
    calls = []

    @app.get("/protected", dependencies=[Depends(gate)])
    def protected(request: Request):
        calls.append(request.state.claims)
        claims: Claims = request.state.claims
        return {"user_id": claims.user_id, "groups": claims.groups}

    return TestClient(app), calls


def test_parse_valid_header():
    assert parse_authorization_header("Bearer abc.def.ghi") == "abc.def.ghi"


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "abc.def.ghi",
        "Bearer",
        "Bearer ",
        "Bearer  ",
        "bearer abc.def.ghi",
        "Basic dXNlcjpwYXNz",
        "Bearer abc def",
        "Token Bearer abc",
    ],
)
def test_parse_rejects_malformed_header(value):
    with pytest.raises(AuthorizationError):
        parse_authorization_header(value)


def test_gate_requires_secret():
    with pytest.raises(ValueError):
        AuthGate("")


def test_gate_verify_returns_claims():
    gate = AuthGate(TEST_SECRET)
    token = make_token(user_id="u-1", username="carol", groups=["g-1"])

    claims = gate.verify(f"Bearer {token}")

    assert claims.user_id == "u-1"
    assert claims.username == "carol"
    assert claims.groups == ["g-1"]


def test_gated_route_passes_claims_to_handler(gated_app):
    client, calls = gated_app
    token = make_token(user_id="u-2", groups=["g-1", "g-2"])

    response = client.get("/protected", headers=bearer(token))

    assert response.status_code == 200
    assert response.json() == {"user_id": "u-2", "groups": ["g-1", "g-2"]}
    assert len(calls) == 1


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": ""},
        {"Authorization": make_token()},
        {"Authorization": f"Token {make_token()}"},
        {"Authorization": "Bearer "},
        bearer("not-a-token"),
        bearer(make_token(secret=OTHER_SECRET)),
        bearer(make_token(now=datetime.now(timezone.utc) - timedelta(hours=3), ttl=timedelta(hours=1))),
    ],
)
def test_gated_route_short_circuits_on_bad_token(gated_app, headers):
    client, calls = gated_app

    response = client.get("/protected", headers=headers)

    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"
    assert calls == []


def test_verification_failures_share_one_message(gated_app):
    client, _ = gated_app
    expired = make_token(now=datetime.now(timezone.utc) - timedelta(hours=3), ttl=timedelta(hours=1))
    foreign = make_token(secret=OTHER_SECRET)

    attempts = [
        {},
        {"Authorization": make_token()},
        {"Authorization": "Bearer "},
        {"Authorization": f"bearer {make_token()}"},
        bearer(expired),
        bearer(foreign),
        bearer("garbage"),
    ]
    details = {client.get("/protected", headers=headers).json()["detail"] for headers in attempts}

    assert details == {INVALID_TOKEN_MESSAGE}


@pytest.mark.parametrize("value", [None, "", "abc.def.ghi", "Bearer ", "Basic dXNlcjpwYXNz"])
def test_header_rejections_use_token_message(value):
    with pytest.raises(AuthorizationError) as exc_info:
        parse_authorization_header(value)
    assert exc_info.value.message == INVALID_TOKEN_MESSAGE
