"""Storage on the local filesystem."""

from __future__ import annotations

import dataclasses
import os
import shutil
from typing import BinaryIO

from jiraboard.filesystem.helpers import detect_mime_type, generate_filename, validate_upload
from jiraboard.filesystem.storage import (
    Driver,
    Storage,
    UploadedFile,
    UploadOptions,
    UploadResult,
)


def _join(*parts: str) -> str:
    present = [part for part in parts if part]
    if not present:
        return ""
    return os.path.normpath(os.sep.join(present))


def _public_url(base_url: str, path: str) -> str:
    return base_url.removesuffix("/") + "/" + path.removeprefix("/")


class LocalStorage(Storage):
    """Files under ``base_path``, optionally served from ``base_url``."""

    def __init__(self, base_path: str, base_url: str = "") -> None:
        self.base_path = base_path
        self.base_url = base_url

    def upload(self, file: UploadedFile, opts: UploadOptions | None = None) -> UploadResult:
        opts = opts or UploadOptions()
        validate_upload(file.size, file.content_type, opts)
        filename = opts.filename or generate_filename(file.filename)
        with file.open() as src:
            result = self.upload_from_reader(src, filename, opts)
        return dataclasses.replace(result, original_name=file.filename)

    def upload_from_reader(
        self, reader: BinaryIO, filename: str, opts: UploadOptions | None = None
    ) -> UploadResult:
        opts = opts or UploadOptions()
        directory = _join(self.base_path, opts.path)
        os.makedirs(directory, mode=0o755, exist_ok=True)
        with open(_join(directory, filename), "wb") as dst:
            shutil.copyfileobj(reader, dst)
            size = dst.tell()
        relative_path = _join(opts.path, filename)
        url = _public_url(self.base_url, relative_path) if self.base_url else ""
        return UploadResult(
            original_name=filename,
            filename=filename,
            path=relative_path,
            size=size,
            mime_type=detect_mime_type(filename),
            url=url,
            driver=Driver.LOCAL,
        )

    def delete(self, path: str) -> None:
        os.remove(_join(self.base_path, path))

    def exists(self, path: str) -> bool:
        try:
            os.stat(_join(self.base_path, path))
        except FileNotFoundError:
            return False
        return True

    def url(self, path: str) -> str:
        if not self.base_url:
            raise ValueError("base URL not configured")
        return _public_url(self.base_url, path)

    def driver(self) -> Driver:
        return Driver.LOCAL