"""Turning application errors into gRPC status errors."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import grpc

from jiraboard import logger
from jiraboard.constants import MSG_INTERNAL_SERVER_ERROR
from jiraboard.utils.errors import ClientError

_HTTP_TO_GRPC = {
    400: grpc.StatusCode.INVALID_ARGUMENT,
    401: grpc.StatusCode.UNAUTHENTICATED,
    403: grpc.StatusCode.PERMISSION_DENIED,
    404: grpc.StatusCode.NOT_FOUND,
    409: grpc.StatusCode.ALREADY_EXISTS,
    422: grpc.StatusCode.INVALID_ARGUMENT,
    429: grpc.StatusCode.RESOURCE_EXHAUSTED,
    503: grpc.StatusCode.UNAVAILABLE,
}


class GrpcStatusError(Exception):
    """An error carrying a gRPC status code and message."""

    def __init__(self, code: grpc.StatusCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"rpc error: code = {self.code.name} desc = {self.message}"


def http_code_to_grpc(http_code: int) -> grpc.StatusCode:
    """Map an HTTP status code to the matching gRPC status code."""
    return _HTTP_TO_GRPC.get(http_code, grpc.StatusCode.INTERNAL)


def _find_client_error(err: BaseException | None) -> ClientError | None:
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, ClientError):
            return err
        seen.add(id(err))
        err = err.__cause__
    return None


def handle_error(ctx: Mapping[Any, Any] | None, err: BaseException) -> GrpcStatusError:
    """Convert ``err`` to a status error; unexpected errors are logged and hidden."""
    client_error = _find_client_error(err)
    if client_error is not None:
        return GrpcStatusError(http_code_to_grpc(client_error.code), client_error.message)
    logger.error(ctx, err)
    return GrpcStatusError(grpc.StatusCode.INTERNAL, MSG_INTERNAL_SERVER_ERROR)