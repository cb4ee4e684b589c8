"""Tests for PIN hashing and session tokens."""

from jose import jwt

from logbook.services.auth import create_access_token, decode_access_token, hash_pin, verify_pin


def test_pin_round_trip():
    hashed = hash_pin("4321")
    assert hashed != "4321"
    assert verify_pin("4321", hashed)
    assert not verify_pin("1234", hashed)


def test_token_carries_trader_id():
    token = create_access_token(7, "Alice")
    assert decode_access_token(token) == 7


def test_foreign_token_rejected():
    forged = jwt.encode({"sub": "7"}, "some-other-secret", algorithm="HS256")
    assert decode_access_token(forged) is None
    assert decode_access_token("garbage") is None
