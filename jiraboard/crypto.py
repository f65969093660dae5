"""AES-256-GCM string encryption with a SHA-256 derived key."""

from __future__ import annotations

import base64
import binascii
import hashlib
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from jiraboard.utils.errors import ClientError

_NONCE_SIZE = 12


def _cipher(key: str) -> AESGCM:
    return AESGCM(hashlib.sha256(key.encode("utf-8")).digest())


def encrypt_string(plain_text: str, key: str) -> str:
    """Encrypt text; the result is URL-safe base64 of nonce plus ciphertext."""
    nonce = os.urandom(_NONCE_SIZE)
    sealed = _cipher(key).encrypt(nonce, plain_text.encode("utf-8"), None)
    return base64.urlsafe_b64encode(nonce + sealed).decode("ascii")


def decrypt_string(encrypted: str, key: str) -> str:
    """Decrypt a value made by :func:`encrypt_string`.

    Raises ``ValueError`` for malformed input and :class:`ClientError`
    (404) when authentication fails.
    """
    try:
        data = base64.b64decode(encrypted, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"failed to decode base64: {exc}") from exc
    if len(data) < _NONCE_SIZE:
        raise ValueError("ciphertext too short")
    nonce, sealed = data[:_NONCE_SIZE], data[_NONCE_SIZE:]
    try:
        plain = _cipher(key).decrypt(nonce, sealed, None)
    except InvalidTag as exc:
        raise ClientError(404, "tenant not found", exc) from exc
    return plain.decode("utf-8", errors="replace")