import base64
import string
import uuid

import pytest

from jiraboard.utils.generator import (
    TOKEN_LENGTH,
    check_password,
    generate_random_number_string,
    generate_random_string,
    generate_refresh_token,
    generate_secure_token,
    generate_uuid,
    generate_verification_token,
    hash_password,
    hash_token,
    verify_token,
)


def test_generate_uuid_is_version_4_and_unique():
    first = generate_uuid()
    second = generate_uuid()
    assert uuid.UUID(first).version == 4
    assert str(uuid.UUID(first)) == first
    assert first != second


def test_password_round_trip():
    password = "password"
    hashed = hash_password(password)
    assert hashed.startswith("$2")
    check_password(password, hashed)


def test_wrong_password_raises():
    hashed = hash_password("password")
    with pytest.raises(ValueError, match="invalid password"):
        check_password("secret", hashed)


def test_invalid_hash_raises():
    with pytest.raises(ValueError, match="invalid password"):
        check_password("password", "token")


def test_overlong_password_rejected():
    with pytest.raises(ValueError, match="failed to hash password"):
        hash_password("x" * 100)


def test_secure_token_decodes_to_requested_length():
    token = generate_secure_token(20)
    assert len(base64.urlsafe_b64decode(token)) == 20
    assert "+" not in token and "/" not in token


def test_refresh_and_verification_tokens():
    refresh = generate_refresh_token()
    verification = generate_verification_token()
    assert len(base64.urlsafe_b64decode(refresh)) == TOKEN_LENGTH
    assert len(base64.urlsafe_b64decode(verification)) == TOKEN_LENGTH
    assert refresh != verification


def test_hash_token_known_digest():
    assert hash_token("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_verify_token():
    hashed = hash_token("token")
    assert verify_token("token", hashed) is True
    assert verify_token("secret", hashed) is False


def test_random_string_letters_only():
    value = generate_random_string(64)
    assert len(value) == 64
    assert set(value) <= set(string.ascii_letters)


def test_random_number_string_digits_only():
    value = generate_random_number_string(30)
    assert len(value) == 30
    assert set(value) <= set(string.digits)