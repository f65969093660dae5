"""Identifier, token and password helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import string
import uuid

import bcrypt

DEFAULT_COST = 12
TOKEN_LENGTH = 32

_LETTERS = string.ascii_lowercase + string.ascii_uppercase
_NUMBERS = string.digits
_BCRYPT_MAX_BYTES = 72


def generate_uuid() -> str:
    """Return a random version-4 UUID string."""
    return str(uuid.uuid4())


def hash_password(password: str) -> str:
    """Hash a password with bcrypt at the default cost."""
    raw = password.encode("utf-8")
    if len(raw) > _BCRYPT_MAX_BYTES:
        raise ValueError("failed to hash password: password length exceeds 72 bytes")
    return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=DEFAULT_COST)).decode("ascii")


def check_password(password: str, hashed: str) -> None:
    """Raise ``ValueError`` unless ``password`` matches the bcrypt ``hashed``."""
    try:
        matches = bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError as exc:
        raise ValueError(f"invalid password: {exc}") from exc
    if not matches:
        raise ValueError("invalid password: hash does not match password")


def generate_secure_token(length: int) -> str:
    """Return ``length`` random bytes as padded URL-safe base64."""
    return base64.urlsafe_b64encode(secrets.token_bytes(length)).decode("ascii")


def generate_refresh_token() -> str:
    """Return a fresh refresh token."""
    return generate_secure_token(TOKEN_LENGTH)


def generate_verification_token() -> str:
    """Return a fresh verification token."""
    return generate_secure_token(TOKEN_LENGTH)


def hash_token(token: str) -> str:
    """Return the hex SHA-256 digest of a token, for storage."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def verify_token(token: str, hashed: str) -> bool:
    """Check a token against its stored hash in constant time."""
    return hmac.compare_digest(hash_token(token).encode("utf-8"), hashed.encode("utf-8"))


def _random_from(alphabet: str, n: int) -> str:
    return "".join(alphabet[b % len(alphabet)] for b in secrets.token_bytes(n))


def generate_random_string(n: int) -> str:
    """Return ``n`` random ASCII letters."""
    return _random_from(_LETTERS, n)


def generate_random_number_string(n: int) -> str:
    """Return ``n`` random decimal digits."""
    return _random_from(_NUMBERS, n)