# tests/test_security.py

from __future__ import annotations

from medicine_tracker_api.app.core.security import create_access_token, decode_access_token


def test_token_round_trip() -> None:
    token = create_access_token({"sub": "clinic-42"})

    payload = decode_access_token(token)

    assert payload is not None
    assert payload["sub"] == "clinic-42"
    assert "exp" in payload


def test_expired_token_is_rejected() -> None:
    token = create_access_token({"sub": "clinic-42"}, expires_delta=-60)
    assert decode_access_token(token) is None


def test_tampered_token_is_rejected() -> None:
    header, payload, signature = create_access_token({"sub": "clinic-42"}).split(".")
    other_payload = create_access_token({"sub": "someone-else"}).split(".")[1]

    assert decode_access_token(f"{header}.{other_payload}.{signature}") is None


def test_malformed_tokens_are_rejected() -> None:
    assert decode_access_token("") is None
    assert decode_access_token("not-a-token") is None
    assert decode_access_token("a.b.c") is None
