"""The storage interface and the values passed through it."""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Sequence


class Driver(str, Enum):
    """Names of the storage backends."""

    LOCAL = "local"
    S3 = "s3"
    DRIVE = "drive"


@dataclass
class UploadOptions:
    """How an upload is placed and what it is allowed to be."""

    path: str = ""
    filename: str = ""
    max_size: int = 0
    allowed_mime_types: Sequence[str] = ()
    public: bool = False


@dataclass
class UploadResult:
    """What an upload produced."""

    original_name: str
    filename: str
    path: str
    size: int
    mime_type: str
    url: str
    driver: Driver

    def to_dict(self) -> dict[str, Any]:
        """Return the result with its wire field names."""
        return {
            "originalName": self.original_name,
            "filename": self.filename,
            "path": self.path,
            "size": self.size,
            "mimeType": self.mime_type,
            "url": self.url,
            "driver": Driver(self.driver).value,
        }


@dataclass
class UploadedFile:
    """A file received in a multipart form."""

    filename: str
    content: bytes
    content_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    def open(self) -> BinaryIO:
        """Return a readable binary stream over the file's content."""
        return io.BytesIO(self.content)


class Storage(ABC):
    """A place files can be uploaded to, checked, addressed and removed."""

    @abstractmethod
    def upload(self, file: UploadedFile, opts: UploadOptions | None = None) -> UploadResult:
        """Store an uploaded form file."""

    @abstractmethod
    def upload_from_reader(
        self, reader: BinaryIO, filename: str, opts: UploadOptions | None = None
    ) -> UploadResult:
        """Store the content of a binary stream under ``filename``."""

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove a stored file."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Tell whether a stored file exists."""

    @abstractmethod
    def url(self, path: str) -> str:
        """Return the public URL of a stored file."""

    @abstractmethod
    def driver(self) -> Driver:
        """Return the backend's driver name."""