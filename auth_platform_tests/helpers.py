"""Shared test helpers: a fixed signing secret and token builders."""
from datetime import timedelta

from auth_platform.core.claims import Claims
from auth_platform.core.tokens import issue_token

TEST_SECRET = "test-secret-for-the-platform-test-suite-0123456789"
OTHER_SECRET = "another-secret-nobody-in-the-test-suite-trusts-42"


def make_token(user_id="11111111-1111-1111-1111-111111111111", username="tester",
               groups=None, ttl=timedelta(hours=1), secret=TEST_SECRET, now=None):
    claims = Claims.for_user(user_id, username, groups or [], ttl, now=now)
    return issue_token(claims, secret)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
