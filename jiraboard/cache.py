"""A key-value store over Redis, confined to one key prefix."""

from __future__ import annotations

from datetime import timedelta
from typing import Any


class PrefixedRedisStorage:
    """Stores values in Redis under ``prefix + key``.

    :meth:`reset` removes only the keys under this prefix, never the whole
    database.
    """

    def __init__(self, client: Any, prefix: str) -> None:
        self.client = client
        self.prefix = prefix
        self.closed = False

    def _key(self, key: str) -> str:
        return self.prefix + key

    def get(self, key: str) -> bytes | None:
        """Return the stored value, or ``None`` if the key is absent."""
        return self.client.get(self._key(key))

    def set(self, key: str, value: bytes, expiry: timedelta | float | None = None) -> None:
        """Store a value; a missing or non-positive expiry keeps it forever."""
        if isinstance(expiry, timedelta):
            seconds = expiry.total_seconds()
        else:
            seconds = float(expiry or 0)
        millis = int(round(seconds * 1000))
        if millis <= 0:
            self.client.set(self._key(key), value)
        elif millis % 1000 == 0:
            self.client.set(self._key(key), value, ex=millis // 1000)
        else:
            self.client.set(self._key(key), value, px=millis)

    def delete(self, key: str) -> None:
        """Remove a key."""
        self.client.delete(self._key(key))

    def reset(self) -> None:
        """Remove every key under this storage's prefix."""
        keys = list(self.client.scan_iter(match=self.prefix + "*", count=100))
        if keys:
            self.client.delete(*keys)

    def close(self) -> None:
        """Mark the storage closed; the Redis client stays open, as its caller owns it."""
        self.closed = True


def new_storage(client: Any, prefix: str) -> PrefixedRedisStorage | None:
    """Wrap a Redis client; ``None`` stays ``None`` so callers can fall back to memory."""
    if client is None:
        return None
    return PrefixedRedisStorage(client, prefix)