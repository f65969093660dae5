"""A thin front over whichever storage backend is configured."""

from __future__ import annotations

from typing import BinaryIO

from jiraboard.filesystem.config import Config
from jiraboard.filesystem.factory import StorageFactory
from jiraboard.filesystem.storage import (
    Driver,
    Storage,
    UploadedFile,
    UploadOptions,
    UploadResult,
)


class Manager:
    """Runs file operations against one storage backend."""

    def __init__(self, storage: Storage, factory: StorageFactory | None = None) -> None:
        self.storage = storage
        self.factory = factory or StorageFactory()

    @classmethod
    def from_config(cls, config: Config) -> "Manager":
        """Build the backend named by ``config.driver`` and wrap it."""
        factory = StorageFactory()
        return cls(factory.create(config.driver, config), factory)

    def upload(self, file: UploadedFile, opts: UploadOptions | None = None) -> UploadResult:
        return self.storage.upload(file, opts)

    def upload_from_reader(
        self, reader: BinaryIO, filename: str, opts: UploadOptions | None = None
    ) -> UploadResult:
        return self.storage.upload_from_reader(reader, filename, opts)

    def delete(self, path: str) -> None:
        self.storage.delete(path)

    def exists(self, path: str) -> bool:
        return self.storage.exists(path)

    def url(self, path: str) -> str:
        return self.storage.url(path)

    def driver(self) -> Driver:
        return self.storage.driver()