import io
import os
import re

import pytest

from jiraboard.filesystem.local import LocalStorage
from jiraboard.filesystem.storage import Driver, UploadedFile, UploadOptions
from jiraboard.utils.errors import ClientError

BASE_URL = "http://files.example.com/"


@pytest.fixture
def store(tmp_path):
    return LocalStorage(str(tmp_path / "store"), BASE_URL)


def test_upload_from_reader_writes_file(store, tmp_path):
    content = b"some text"
    result = store.upload_from_reader(io.BytesIO(content), "a.txt", UploadOptions(path="docs"))
    assert result.path == os.path.join("docs", "a.txt")
    assert result.size == len(content)
    assert result.mime_type == "text/plain"
    assert result.driver is Driver.LOCAL
    assert result.original_name == "a.txt"
    assert (tmp_path / "store" / "docs" / "a.txt").read_bytes() == content


def test_upload_from_reader_builds_url(store):
    result = store.upload_from_reader(io.BytesIO(b"x"), "a.txt", UploadOptions(path="docs"))
    assert result.url == "http://files.example.com/" + os.path.join("docs", "a.txt")


def test_no_url_without_base(tmp_path):
    storage = LocalStorage(str(tmp_path))
    result = storage.upload_from_reader(io.BytesIO(b"x"), "a.txt")
    assert result.url == ""
    with pytest.raises(ValueError):
        storage.url("a.txt")


def test_upload_generates_name_and_keeps_original(store, tmp_path):
    content = b"notes here"
    file = UploadedFile("notes.txt", content, "text/plain")
    result = store.upload(file, UploadOptions())
    assert result.original_name == "notes.txt"
    assert re.fullmatch(r"\d{8}_\d{6}_[0-9a-f]{8}\.txt", result.filename)
    assert (tmp_path / "store" / result.path).read_bytes() == content


def test_upload_uses_given_filename(store):
    result = store.upload(UploadedFile("x.png", b"png", "image/png"), UploadOptions(filename="fixed.png"))
    assert result.filename == "fixed.png"
    assert store.exists("fixed.png") is True


def test_upload_rejects_oversized_file(store, tmp_path):
    with pytest.raises(ClientError) as info:
        store.upload(UploadedFile("big.txt", b"0123456789", "text/plain"), UploadOptions(max_size=4))
    assert info.value.code == 400
    assert not (tmp_path / "store").exists()


def test_upload_rejects_mime_type(store):
    with pytest.raises(ClientError):
        store.upload(
            UploadedFile("a.txt", b"x", "text/plain"),
            UploadOptions(allowed_mime_types=("image/png",)),
        )


def test_exists_and_delete(store):
    store.upload_from_reader(io.BytesIO(b"x"), "gone.txt")
    assert store.exists("gone.txt") is True
    store.delete("gone.txt")
    assert store.exists("gone.txt") is False


def test_delete_missing_raises(store):
    with pytest.raises(FileNotFoundError):
        store.delete("missing.txt")


def test_url_joins_single_slash(store):
    assert store.url("/img/a.png") == "http://files.example.com/img/a.png"


def test_driver(store):
    assert store.driver() is Driver.LOCAL