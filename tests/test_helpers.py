import string
from datetime import datetime, timedelta

import pytest

from jiraboard.filesystem.helpers import (
    convert_to_mb,
    detect_mime_type,
    generate_filename,
    validate_upload,
)
from jiraboard.filesystem.storage import UploadOptions
from jiraboard.utils.errors import ClientError


@pytest.mark.parametrize(
    "name, expected",
    [
        ("photo.JPG", "image/jpeg"),
        ("scan.jpeg", "image/jpeg"),
        ("doc.pdf", "application/pdf"),
        ("data.csv", "text/csv"),
        ("archive.zip", "application/zip"),
        ("dir/notes.txt", "text/plain"),
    ],
)
def test_detect_mime_type_known(name, expected):
    assert detect_mime_type(name) == expected


@pytest.mark.parametrize("name", ["binary.bin", "README", "weird.tar.gz"])
def test_detect_mime_type_unknown(name):
    assert detect_mime_type(name) == "application/octet-stream"


def _check_stamp_and_hash(name):
    stamp = datetime.strptime(name[:15], "%Y%m%d_%H%M%S")
    current = datetime.utcnow()
    assert abs(current - stamp) < timedelta(minutes=1)
    assert name[15] == "_"
    random_hash = name[16:24]
    assert len(random_hash) == 8
    assert set(random_hash) <= set(string.hexdigits.lower())


def test_generate_filename_keeps_extension():
    name = generate_filename("report.pdf")
    assert len(name) == len("20240101_120000_abcdef12.pdf")
    assert name[24:] == ".pdf"
    _check_stamp_and_hash(name)


def test_generate_filename_without_extension():
    name = generate_filename("README")
    assert len(name) == len("20240101_120000_abcdef12")
    _check_stamp_and_hash(name)


def test_generate_filename_is_unique():
    names = {generate_filename("a.png") for _ in range(20)}
    assert len(names) == 20


def test_validate_upload_rejects_large_file():
    with pytest.raises(ClientError) as info:
        validate_upload(3 * 1024 * 1024, "image/png", UploadOptions(max_size=2 * 1024 * 1024))
    assert info.value.code == 400
    assert info.value.message == "Ukuran file melebihi batas maksimum 1mb"


def test_validate_upload_rejects_mime_type():
    with pytest.raises(ClientError) as info:
        validate_upload(10, "text/plain", UploadOptions(allowed_mime_types=["image/png"]))
    assert info.value.code == 400
    assert info.value.message == "mime type text/plain is not allowed"


def test_validate_upload_accepts_within_limits():
    opts = UploadOptions(max_size=100, allowed_mime_types=["image/png"])
    assert validate_upload(100, "image/png", opts) is None


@pytest.mark.parametrize("n", [1, 3, 10])
def test_convert_to_mb_round_trip(n):
    assert convert_to_mb(n * 1024 * 1024) == n