"""Error types that separate client-facing failures from internal ones."""

from __future__ import annotations

import inspect


class ClientError(Exception):
    """An error whose message may be shown to the caller, with an HTTP status code."""

    def __init__(self, code: int, message: str, err: BaseException | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.err = err

    def __str__(self) -> str:
        return self.message


class InternalError(Exception):
    """Wraps an error with the file and line where it was wrapped."""

    def __init__(self, err: BaseException, file: str, line: int, msg: str) -> None:
        super().__init__(msg)
        self.err = err
        self.file = file
        self.line = line
        self.msg = msg
        self.__cause__ = err

    def __str__(self) -> str:
        return self.msg

    def location(self) -> str:
        """Return the wrap site as ``file:line``."""
        return f"{self.file}:{self.line}"


def client_err(code: int, message: str, err: BaseException | None = None) -> ClientError:
    """Build a :class:`ClientError`."""
    return ClientError(code, message, err)


def wrap_err(err: BaseException | None, msg: str | None = None) -> InternalError | None:
    """Wrap ``err`` with the caller's file and line; ``None`` passes through."""
    if err is None:
        return None
    full_msg = f"{msg}: {err}" if msg is not None else str(err)
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    try:
        file = caller.f_code.co_filename if caller is not None else ""
        line = caller.f_lineno if caller is not None else 0
    finally:
        del frame, caller
    return InternalError(err, file, line, full_msg)