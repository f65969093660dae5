"""Building a storage backend from configuration."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from jiraboard.filesystem.config import Config, DriveConfig, LocalConfig, S3Config
from jiraboard.filesystem.local import LocalStorage
from jiraboard.filesystem.storage import Driver, Storage

Builder = Callable[[Any], Storage]


class UnsupportedDriverError(Exception):
    """Raised for a driver that has no backend."""

    def __init__(self, driver: str) -> None:
        super().__init__(driver)
        self.driver = driver

    def __str__(self) -> str:
        return f"unsupported storage driver: {self.driver}"


def _build_local(config: LocalConfig) -> Storage:
    return LocalStorage(config.base_path, config.base_url)


def _check_local(config: LocalConfig) -> None:
    if not config.base_path:
        raise ValueError("local storage requires base_path")


def _check_s3(config: S3Config) -> None:
    if not config.bucket or not config.region:
        raise ValueError("s3 storage requires bucket and region")


def _check_drive(config: DriveConfig) -> None:
    if not config.folder_id:
        raise ValueError("drive storage requires folder_id")
    has_service_account = bool(config.credentials_file)
    has_oauth = bool(config.client_id and config.client_secret and config.refresh_token)
    if not has_service_account and not has_oauth:
        raise ValueError(
            "drive storage requires either credentials_file (service account) "
            "or client_id+client_secret+refresh_token (oauth)"
        )


class StorageFactory:
    """Creates storage backends by driver name.

    The local backend is built in; other backends are supplied as builders
    that receive the driver's own section of the configuration.
    """

    def __init__(self, builders: Mapping[Driver, Builder] | None = None) -> None:
        self._builders: dict[Driver, Builder] = {Driver.LOCAL: _build_local}
        if builders:
            self._builders.update({Driver(key): value for key, value in builders.items()})

    def create(self, driver: Driver | str, config: Config) -> Storage:
        """Validate the driver's settings and build its backend."""
        try:
            name = Driver(driver)
        except ValueError:
            raise UnsupportedDriverError(str(driver)) from None
        section: Any
        if name is Driver.LOCAL:
            section = config.local
            _check_local(section)
        elif name is Driver.S3:
            section = config.s3
            _check_s3(section)
        else:
            section = config.drive
            _check_drive(section)
        builder = self._builders.get(name)
        if builder is None:
            raise UnsupportedDriverError(name.value)
        return builder(section)