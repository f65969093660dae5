"""Standard response envelopes for the HTTP API."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Callable, Union

from jiraboard import logger
from jiraboard.constants import (
    MSG_FORBIDDEN,
    MSG_INTERNAL_SERVER_ERROR,
    MSG_OPERATION_COMPLETED_SUCCESSFULLY,
    MSG_RESOURCE_CREATED_SUCCESSFULLY,
    MSG_RESOURCE_NOT_FOUND,
    MSG_SUCCESS,
    MSG_UNAUTHORIZED,
)
from jiraboard.utils.errors import ClientError

_TOO_MANY_REQUESTS = "Too many requests, please try again later"


@dataclass
class Meta:
    """Extra information attached to a response."""

    message: str = ""
    request_id: str = ""
    timestamp: str = ""

    def _to_dict(self) -> dict[str, str]:
        fields = {"message": self.message, "request_id": self.request_id, "timestamp": self.timestamp}
        return {key: value for key, value in fields.items() if value}


@dataclass
class BaseResponse:
    """The envelope every response body uses."""

    success: bool
    message: str
    data: Any = None
    meta: Meta | None = None
    errors: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the body with empty optional fields left out."""
        out: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        if self.meta is not None:
            out["meta"] = self.meta._to_dict()
        if self.errors is not None:
            out["errors"] = self.errors
        return out


@dataclass
class PaginatedBody:
    """The envelope of a page of results."""

    success: bool
    message: str
    data: Any = None
    pagination: Any = None
    meta: Meta | None = None
    errors: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Return the body; data and pagination are always present."""
        out: dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "data": self.data,
            "pagination": self.pagination,
        }
        if self.meta is not None:
            out["meta"] = self.meta._to_dict()
        if self.errors is not None:
            out["errors"] = self.errors
        return out


@dataclass
class Reply:
    """A status code with the body to send."""

    status_code: int
    body: Union[BaseResponse, PaginatedBody]


ResponseOption = Callable[[BaseResponse], None]


def with_meta(meta: Meta | None) -> ResponseOption:
    """Option that attaches metadata."""

    def apply(response: BaseResponse) -> None:
        response.meta = meta

    return apply


def with_message(message: str) -> ResponseOption:
    """Option that replaces the message."""

    def apply(response: BaseResponse) -> None:
        response.message = message

    return apply


def _build(status: int, response: BaseResponse, options: tuple[ResponseOption, ...]) -> Reply:
    for option in options:
        option(response)
    return Reply(status, response)


def success(data: Any, *args: ResponseOption) -> Reply:
    """200 with data."""
    return _build(HTTPStatus.OK, BaseResponse(True, MSG_SUCCESS, data), args)


def created(data: Any, *args: ResponseOption) -> Reply:
    """201 with the created resource."""
    return _build(HTTPStatus.CREATED, BaseResponse(True, MSG_RESOURCE_CREATED_SUCCESSFULLY, data), args)


def no_content(*args: ResponseOption) -> Reply:
    """204 without data."""
    return _build(HTTPStatus.NO_CONTENT, BaseResponse(True, MSG_OPERATION_COMPLETED_SUCCESSFULLY), args)


def _failure(status: int, message: str, errors: Any = None) -> Reply:
    return Reply(status, BaseResponse(False, message, errors=errors))


def bad_request(message: str, errors: Any = None) -> Reply:
    """400 with error details."""
    return _failure(HTTPStatus.BAD_REQUEST, message, errors)


def unauthorized(message: str = "") -> Reply:
    """401; an empty message falls back to the default."""
    return _failure(HTTPStatus.UNAUTHORIZED, message or MSG_UNAUTHORIZED)


def forbidden(message: str = "") -> Reply:
    """403; an empty message falls back to the default."""
    return _failure(HTTPStatus.FORBIDDEN, message or MSG_FORBIDDEN)


def not_found(message: str = "") -> Reply:
    """404; an empty message falls back to the default."""
    return _failure(HTTPStatus.NOT_FOUND, message or MSG_RESOURCE_NOT_FOUND)


def conflict(message: str, errors: Any = None) -> Reply:
    """409 with error details."""
    return _failure(HTTPStatus.CONFLICT, message, errors)


def unprocessable_entity(message: str, errors: Any = None) -> Reply:
    """422 with error details."""
    return _failure(HTTPStatus.UNPROCESSABLE_ENTITY, message, errors)


def internal_server_error(message: str = "") -> Reply:
    """500; an empty message falls back to the default."""
    return _failure(HTTPStatus.INTERNAL_SERVER_ERROR, message or MSG_INTERNAL_SERVER_ERROR)


def validation_error(errors: Any) -> Reply:
    """400 carrying validation failures."""
    return _failure(HTTPStatus.BAD_REQUEST, "Validation failed", errors)


def paginated(data: Any, pagination_data: Any, *args: ResponseOption) -> Reply:
    """200 with a page of data and its pagination details."""
    base = BaseResponse(True, MSG_SUCCESS)
    for option in args:
        option(base)
    body = PaginatedBody(
        success=base.success,
        message=base.message,
        data=data,
        pagination=pagination_data,
        meta=base.meta,
    )
    return Reply(HTTPStatus.OK, body)


def too_many_requests(message: str = "") -> Reply:
    """429; an empty message falls back to the default."""
    return _failure(HTTPStatus.TOO_MANY_REQUESTS, message or _TOO_MANY_REQUESTS)


def custom_error(status_code: int, message: str, errors: Any = None) -> Reply:
    """An error with any status code."""
    return _failure(status_code, message, errors)


def success_with_meta(data: Any, message: str, meta: Meta | None) -> Reply:
    """200 with a custom message and metadata."""
    return success(data, with_message(message), with_meta(meta))


def error_with_details(status_code: int, message: str, details: Any, meta: Meta | None) -> Reply:
    """An error with details and metadata."""
    return Reply(status_code, BaseResponse(False, message, errors=details, meta=meta))


def _find_client_error(err: BaseException | None) -> ClientError | None:
    seen: set[int] = set()
    while err is not None and id(err) not in seen:
        if isinstance(err, ClientError):
            return err
        seen.add(id(err))
        err = err.__cause__
    return None


def handle_error(ctx: Mapping[Any, Any] | None, err: BaseException) -> Reply:
    """Answer client errors with their own code; log and hide anything else."""
    client_error = _find_client_error(err)
    if client_error is not None:
        return custom_error(client_error.code, client_error.message, None)
    logger.error(ctx, err)
    return internal_server_error(MSG_INTERNAL_SERVER_ERROR)