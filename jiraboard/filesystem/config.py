"""Configuration for the file storage backends."""

from __future__ import annotations

from dataclasses import dataclass, field

from jiraboard.filesystem.storage import Driver


@dataclass
class LocalConfig:
    """Settings for storage on the local filesystem."""

    base_path: str = ""
    base_url: str = ""


@dataclass
class S3Config:
    """Settings for S3-compatible object storage."""

    access_key_id: str = ""
    secret_access_key: str = ""
    region: str = ""
    bucket: str = ""
    endpoint: str = ""


@dataclass
class DriveConfig:
    """Settings for Google Drive storage.

    Either ``credentials_file`` (service account) or the OAuth triple
    ``client_id``, ``client_secret`` and ``refresh_token`` is required.
    """

    credentials_file: str = ""
    client_id: str = ""
    client_secret: str = ""
    refresh_token: str = ""
    folder_id: str = ""


@dataclass
class Config:
    """Which driver to use, plus the settings of every driver."""

    driver: Driver | str = Driver.LOCAL
    local: LocalConfig = field(default_factory=LocalConfig)
    s3: S3Config = field(default_factory=S3Config)
    drive: DriveConfig = field(default_factory=DriveConfig)