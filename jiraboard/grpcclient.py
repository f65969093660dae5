"""gRPC client channels that tag calls with a request id and log them."""

from __future__ import annotations

import base64
import collections
import logging
import os
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Sequence

import grpc

from jiraboard.constants import HEADER_REQUEST_ID

LOG_LABEL = "outgoing-grpc-request-log"
DEFAULT_TIMEOUT = 30.0

_LOGGER = logging.getLogger("jiraboard.grpcclient")
_REQUEST_ID_KEY = HEADER_REQUEST_ID.lower()

_LABEL_REPEATED = 3
_TYPE_BYTES = 12
_TYPES_64BIT = frozenset({3, 4, 6, 16, 18})
_CODE_NAMES = {"OK": "OK", "CANCELLED": "Canceled"}


@dataclass
class Config:
    """Channel settings; a zero timeout means 30 seconds."""

    timeout: float = 0.0
    insecure: bool = False
    credentials: Any = None
    options: Sequence[tuple[str, Any]] = ()


class _CallDetails(
    collections.namedtuple(
        "_CallDetails",
        ("method", "timeout", "metadata", "credentials", "wait_for_ready", "compression"),
    ),
    grpc.ClientCallDetails,
):
    pass


def _details(original: Any, timeout: float | None, metadata: list[tuple[str, str]]) -> _CallDetails:
    return _CallDetails(
        method=original.method,
        timeout=timeout,
        metadata=metadata,
        credentials=getattr(original, "credentials", None),
        wait_for_ready=getattr(original, "wait_for_ready", None),
        compression=getattr(original, "compression", None),
    )


def ensure_request_id(metadata: Any = None) -> tuple[str, list[tuple[str, str]]]:
    """Return the request id in ``metadata``, adding a new one if absent."""
    pairs = [tuple(pair) for pair in (metadata or ())]
    for key, value in pairs:
        if str(key).lower() == _REQUEST_ID_KEY:
            return str(value), pairs
    request_id = str(uuid.uuid4())
    pairs.append((_REQUEST_ID_KEY, request_id))
    return request_id, pairs


def stream_type(client_streams: bool, server_streams: bool) -> str:
    """Name the kind of call: ``bidi``, ``client``, ``server`` or ``unary``."""
    if client_streams and server_streams:
        return "bidi"
    if client_streams:
        return "client"
    if server_streams:
        return "server"
    return "unary"


def _scalar(field: Any, value: Any) -> Any:
    if callable(getattr(value, "ListFields", None)):
        return _message_to_dict(value)
    enum_type = getattr(field, "enum_type", None)
    if enum_type is not None and isinstance(value, int):
        entry = enum_type.values_by_number.get(value)
        return entry.name if entry is not None else value
    if isinstance(value, bytes) or getattr(field, "type", None) == _TYPE_BYTES:
        return base64.b64encode(bytes(value)).decode("ascii")
    if getattr(field, "type", None) in _TYPES_64BIT and isinstance(value, int):
        return str(value)
    return value


def _message_to_dict(message: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for field, value in message.ListFields():
        key = getattr(field, "json_name", "") or field.name
        if isinstance(value, Mapping) or callable(getattr(value, "items", None)):
            out[key] = {str(k): _scalar(None, v) for k, v in value.items()}
        elif getattr(field, "label", None) == _LABEL_REPEATED:
            out[key] = [_scalar(field, item) for item in value]
        else:
            out[key] = _scalar(field, value)
    return out


def marshal_proto(value: Any) -> Any:
    """Render a protobuf message as JSON-like data for logging; pass other values through."""
    if value is None:
        return None
    if not callable(getattr(value, "ListFields", None)):
        return value
    try:
        return _message_to_dict(value)
    except Exception:
        return None


def _code_name(code: Any) -> str:
    if code is None:
        return "Unknown"
    name = getattr(code, "name", str(code))
    return _CODE_NAMES.get(name) or "".join(part.capitalize() for part in name.split("_"))


def _logging_enabled() -> bool:
    return os.environ.get("APP_ENV", "").lower() != "local"


class _LoggingInterceptor(
    grpc.UnaryUnaryClientInterceptor,
    grpc.UnaryStreamClientInterceptor,
    grpc.StreamUnaryClientInterceptor,
    grpc.StreamStreamClientInterceptor,
):
    def __init__(self, target: str, default_timeout: float) -> None:
        self.target = target
        self.default_timeout = default_timeout

    def intercept_unary_unary(self, continuation: Any, client_call_details: Any, request: Any) -> Any:
        started = time.perf_counter()
        request_id, metadata = ensure_request_id(client_call_details.metadata)
        timeout = client_call_details.timeout
        if timeout is None and self.default_timeout > 0:
            timeout = self.default_timeout

        outcome = continuation(_details(client_call_details, timeout, metadata), request)
        error = outcome.exception()
        response = outcome.result() if error is None else None

        attrs: dict[str, Any] = {
            "label": LOG_LABEL,
            "request_id": request_id,
            "method": client_call_details.method,
            "target": self.target,
            "request": marshal_proto(request),
            "response": marshal_proto(response),
            "status_code": _code_name(outcome.code()),
            "status_message": outcome.details() or "",
            "latency_ms": (time.perf_counter() - started) * 1000,
        }
        if error is not None:
            attrs["error"] = str(error)
        if _logging_enabled():
            _LOGGER.info("Outgoing gRPC request", extra={"attrs": attrs})
        return outcome

    def _stream(self, continuation: Any, client_call_details: Any, payload: Any, kind: str) -> Any:
        started = time.perf_counter()
        request_id, metadata = ensure_request_id(client_call_details.metadata)
        details = _details(client_call_details, client_call_details.timeout, metadata)
        failure: BaseException | None = None
        try:
            return continuation(details, payload)
        except BaseException as exc:
            failure = exc
            raise
        finally:
            code = failure.code() if isinstance(failure, grpc.RpcError) and hasattr(failure, "code") else None
            attrs: dict[str, Any] = {
                "label": LOG_LABEL,
                "request_id": request_id,
                "method": client_call_details.method,
                "target": self.target,
                "stream_type": kind,
                "status_code": "OK" if failure is None else _code_name(code),
                "latency_ms": (time.perf_counter() - started) * 1000,
            }
            if failure is not None:
                attrs["error"] = str(failure)
            if _logging_enabled():
                _LOGGER.info("Outgoing gRPC stream", extra={"attrs": attrs})

    def intercept_unary_stream(self, continuation: Any, client_call_details: Any, request: Any) -> Any:
        return self._stream(continuation, client_call_details, request, stream_type(False, True))

    def intercept_stream_unary(self, continuation: Any, client_call_details: Any, request_iterator: Any) -> Any:
        return self._stream(continuation, client_call_details, request_iterator, stream_type(True, False))

    def intercept_stream_stream(self, continuation: Any, client_call_details: Any, request_iterator: Any) -> Any:
        return self._stream(continuation, client_call_details, request_iterator, stream_type(True, True))


def new_conn(target: str, config: Config | None = None, *args: Any) -> grpc.Channel:
    """Open a channel to ``target`` with request-id and logging interceptors.

    Extra client interceptors may follow the config. Without ``insecure``,
    channel credentials must be supplied in the config.
    """
    config = config or Config()
    timeout = config.timeout or DEFAULT_TIMEOUT
    options = list(config.options)

    if config.insecure:
        channel = grpc.insecure_channel(target, options=options)
    elif config.credentials is not None:
        channel = grpc.secure_channel(target, config.credentials, options=options)
    else:
        raise ValueError("no transport security set: use Config.insecure or Config.credentials")

    return grpc.intercept_channel(channel, _LoggingInterceptor(target, timeout), *args)