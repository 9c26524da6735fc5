"""Tests for token issuing and verification."""
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from auth import issue_token, decode_token
from errors import Unauthenticated


def test_token_round_trips_user_id():
    token = issue_token("65f0c0ffee", secret="s1")
    assert decode_token(token, secrets=["s1"]) == "65f0c0ffee"


def test_token_payload_shape():
    token = issue_token("abc", secret="s1", expire_minutes=0)
    payload = jwt.decode(token, "s1", algorithms=["HS256"])
    assert payload == {"user": {"id": "abc"}}


def test_token_has_expiry_when_configured():
    token = issue_token("abc", secret="s1", expire_minutes=5)
    payload = jwt.decode(token, "s1", algorithms=["HS256"])
    assert "exp" in payload


@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
def test_missing_or_malformed_token_is_rejected(token):
    with pytest.raises(Unauthenticated):
        decode_token(token, secrets=["s1"])


def test_token_signed_with_other_secret_is_rejected():
    token = issue_token("abc", secret="other")
    with pytest.raises(Unauthenticated):
        decode_token(token, secrets=["s1"])


def test_expired_token_is_rejected():
    expired = jwt.encode(
        {"user": {"id": "abc"}, "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        "s1",
        algorithm="HS256"
    )
    with pytest.raises(Unauthenticated):
        decode_token(expired, secrets=["s1"])


def test_previous_secret_still_verifies():
    token = issue_token("abc", secret="old")
    assert decode_token(token, secrets=["new", "old"]) == "abc"


def test_token_without_user_claim_is_rejected():
    token = jwt.encode({"sub": "abc"}, "s1", algorithm="HS256")
    with pytest.raises(Unauthenticated):
        decode_token(token, secrets=["s1"])


def test_protected_route_requires_header(client):
    response = client.post("/getcart")
    assert response.status_code == 401
    assert response.json()["errors"] == "Please authenticate using a valid token"


def test_protected_route_rejects_bad_token(client):
    response = client.post("/getcart", headers={"auth-token": "garbage"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "errors": "Please authenticate using a valid token"}
