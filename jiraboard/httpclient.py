"""An HTTP client that logs every outgoing request and its response."""

from __future__ import annotations

import json
import logging
import os
import time
import uuid
from typing import Any
from urllib.parse import parse_qs, urlsplit

import requests
from requests.adapters import HTTPAdapter

from jiraboard.constants import HEADER_REQUEST_ID
from jiraboard.utils.timestamp import now

LOG_LABEL = "outgoing-request-log"
DEFAULT_TIMEOUT = 30.0

_LOGGER = logging.getLogger("jiraboard.httpclient")
_PREVIEW_LIMIT = 1000


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def _text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


def parse_body(body: bytes | None, content_type: str) -> Any:
    """Describe a body for logging according to its content type."""
    if not body:
        return None
    media_type = _media_type(content_type or "")

    if media_type == "application/json":
        try:
            return json.loads(body)
        except ValueError:
            return _text(body)

    if media_type == "multipart/form-data":
        return {
            "content_type": content_type,
            "message": "multipart/form-data content (binary data not logged)",
            "size_bytes": len(body),
        }

    if media_type == "application/octet-stream" or media_type.startswith(("image/", "video/", "audio/")):
        return {
            "content_type": content_type,
            "message": "binary/media content not logged",
            "size_bytes": len(body),
        }

    if media_type == "application/x-www-form-urlencoded":
        return _text(body)

    if len(body) > _PREVIEW_LIMIT:
        return {
            "content_type": content_type,
            "message": "content truncated (too large)",
            "size_bytes": len(body),
            "preview": _text(body[:_PREVIEW_LIMIT]),
            "truncated_at": _PREVIEW_LIMIT,
        }
    return _text(body)


def _capture_request_body(request: requests.PreparedRequest) -> bytes | None:
    body = request.body
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    if hasattr(body, "read"):
        data = body.read()
        data = data.encode("utf-8") if isinstance(data, str) else data
    else:
        data = b"".join(chunk.encode("utf-8") if isinstance(chunk, str) else chunk for chunk in body)
    request.body = data
    return data


def _query_params(url: str) -> dict[str, str]:
    query = parse_qs(urlsplit(url).query, keep_blank_values=True)
    return {key: values[0] for key, values in query.items() if values}


def _logging_enabled() -> bool:
    return os.environ.get("APP_ENV", "").lower() != "local"


class LoggingAdapter(HTTPAdapter):
    """Transport adapter that tags requests with an id and logs each exchange."""

    def __init__(self, timeout: float | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.timeout = timeout

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        if kwargs.get("timeout") is None and self.timeout is not None:
            kwargs["timeout"] = self.timeout

        start_time = now().isoformat()
        started = time.perf_counter()

        request_id = request.headers.get(HEADER_REQUEST_ID)
        if not request_id:
            request_id = str(uuid.uuid4())
            request.headers[HEADER_REQUEST_ID] = request_id

        raw_body = _capture_request_body(request)
        request_payload = None
        if raw_body is not None:
            request_payload = parse_body(raw_body, request.headers.get("Content-Type", ""))

        try:
            response = super().send(request, **kwargs)
        except Exception as exc:
            self._log(request, request_id, request_payload, None, exc, start_time, started)
            raise
        self._log(request, request_id, request_payload, response, None, start_time, started)
        return response

    def _log(
        self,
        request: requests.PreparedRequest,
        request_id: str,
        request_payload: Any,
        response: requests.Response | None,
        failure: BaseException | None,
        start_time: str,
        started: float,
    ) -> None:
        latency_ms = (time.perf_counter() - started) * 1000
        end_time = now().isoformat()

        status = 0
        response_size = 0
        response_body: Any = None
        response_headers: dict[str, Any] | None = None
        response_message = ""
        if response is not None:
            status = response.status_code
            response_headers = dict(response.headers)
            content = response.content or b""
            response_size = len(content)
            response_body = parse_body(content, response.headers.get("Content-Type", ""))
            if isinstance(response_body, dict) and isinstance(response_body.get("message"), str):
                response_message = response_body["message"]

        url = request.url or ""
        parts = urlsplit(url)
        attrs: dict[str, Any] = {
            "label": LOG_LABEL,
            "request_id": request_id,
            "method": request.method,
            "url": url,
            "path": parts.path,
            "host": parts.netloc,
            "query_params": _query_params(url),
            "request_headers": dict(request.headers),
            "request_payload": request_payload,
            "status": status,
            "response_headers": response_headers,
            "response_size": response_size,
            "response_body": response_body,
            "response_message": response_message,
            "start_time": start_time,
            "end_time": end_time,
            "latency_ms": latency_ms,
        }
        if failure is not None:
            attrs["error"] = str(failure)

        if _logging_enabled():
            _LOGGER.info("Outgoing HTTP request", extra={"attrs": attrs})


def new_client(timeout: float | None = None) -> requests.Session:
    """Return a session whose requests are logged; no timeout means 30 seconds."""
    if not timeout:
        timeout = DEFAULT_TIMEOUT
    session = requests.Session()
    adapter = LoggingAdapter(timeout=timeout)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session