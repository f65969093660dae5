import fnmatch
from datetime import timedelta

import pytest

from jiraboard.cache import PrefixedRedisStorage, new_storage


class FakeRedis:
    def __init__(self):
        self.data = {}
        self.expiries = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None, px=None):
        self.data[key] = value
        self.expiries[key] = (ex, px)
        return True

    def delete(self, *keys):
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    def scan_iter(self, match=None, count=None):
        return iter([key for key in list(self.data) if fnmatch.fnmatchcase(key, match)])


@pytest.fixture
def redis_client():
    return FakeRedis()


def test_new_storage_without_client_is_none():
    assert new_storage(None, "rl:") is None


def test_new_storage_wraps_client(redis_client):
    storage = new_storage(redis_client, "rl:")
    assert isinstance(storage, PrefixedRedisStorage)
    assert storage.prefix == "rl:"


def test_set_get_round_trip_uses_prefix(redis_client):
    storage = new_storage(redis_client, "idem:")
    storage.set("abc", b"value")
    assert storage.get("abc") == b"value"
    assert "idem:abc" in redis_client.data
    assert redis_client.expiries["idem:abc"] == (None, None)


def test_get_missing_is_none(redis_client):
    assert new_storage(redis_client, "rl:").get("nope") is None


def test_whole_second_expiry_uses_seconds(redis_client):
    storage = new_storage(redis_client, "rl:")
    storage.set("k", b"v", timedelta(hours=24))
    assert redis_client.expiries["rl:k"] == (86400, None)


def test_fractional_expiry_uses_milliseconds(redis_client):
    storage = new_storage(redis_client, "rl:")
    storage.set("k", b"v", 1.5)
    assert redis_client.expiries["rl:k"] == (None, 1500)


def test_delete_removes_key(redis_client):
    storage = new_storage(redis_client, "rl:")
    storage.set("k", b"v")
    storage.delete("k")
    assert storage.get("k") is None


def test_reset_only_touches_own_prefix(redis_client):
    mine = new_storage(redis_client, "rl:")
    other = new_storage(redis_client, "idem:")
    mine.set("a", b"1")
    mine.set("b", b"2")
    other.set("a", b"3")
    mine.reset()
    assert mine.get("a") is None
    assert mine.get("b") is None
    assert other.get("a") == b"3"


def test_reset_with_no_keys_and_close(redis_client):
    storage = new_storage(redis_client, "rl:")
    storage.reset()
    storage.close()
    assert redis_client.data == {}