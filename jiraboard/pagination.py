"""Page and limit parsing, and the shape of a page of results."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar
from urllib.parse import parse_qs

T = TypeVar("T")

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass
class PaginationConfig:
    """Page and limit used when the request gives none."""

    default_page: int = 1
    default_limit: int = 10


@dataclass
class PaginationRequest:
    """The page and page size a client asked for."""

    page: int = 1
    limit: int = 10

    def validate(self, config: PaginationConfig) -> None:
        """Replace non-positive values with the configured defaults."""
        if self.page <= 0:
            self.page = config.default_page
        if self.limit <= 0:
            self.limit = config.default_limit

    def offset(self) -> int:
        """Number of items before the first one on this page."""
        return (self.page - 1) * self.limit


def _trunc_div(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


@dataclass
class PaginatedResponse(Generic[T]):
    """One page of items with the numbers needed to move between pages."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10
    total_pages: int = 0
    has_next: bool = False
    has_prev: bool = False

    @classmethod
    def create(cls, items: list[T], total: int, page: int, limit: int) -> "PaginatedResponse[T]":
        """Build a page, working out the page count and neighbours."""
        total_pages = _trunc_div(total + limit - 1, limit)
        return cls(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


def _atoi(text: object) -> int | None:
    if not isinstance(text, str) or not _INT_RE.fullmatch(text):
        return None
    return int(text)


def _positive(text: object) -> int | None:
    value = _atoi(text)
    return value if value is not None and value > 0 else None


def _as_text(body: bytes | str | None) -> str:
    if body is None:
        return ""
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def _json_values(text: str) -> tuple[int, int] | None:
    try:
        data = json.loads(text)
    except ValueError:
        return None
    if data is None:
        return 0, 0
    if not isinstance(data, dict):
        return None
    values = []
    for key in ("page", "limit"):
        value = data.get(key)
        if value is None:
            values.append(0)
        elif isinstance(value, int) and not isinstance(value, bool):
            values.append(value)
        else:
            return None
    return values[0], values[1]


def _form_values(text: str) -> tuple[int, int] | None:
    parsed = parse_qs(text, keep_blank_values=True)
    values = []
    for key in ("page", "limit"):
        raw = parsed.get(key, [""])[0]
        if raw == "":
            values.append(0)
            continue
        number = _atoi(raw)
        if number is None:
            return None
        values.append(number)
    return values[0], values[1]


def extract_param(body: str, param: str) -> str:
    """Return the value of ``param`` in a ``k=v&k=v`` string, or ``""``."""
    for part in body.split("&"):
        pair = part.split("=")
        if len(pair) == 2 and pair[0] == param:
            return pair[1]
    return ""


def parse_pagination(
    query: Mapping[str, str] | None = None,
    form: Mapping[str, str] | None = None,
    content_type: str = "",
    body: bytes | str | None = b"",
    config: PaginationConfig | None = None,
) -> PaginationRequest:
    """Read page and limit from the query, then form values, then the body.

    A value still equal to its default may be taken from a later source.
    """
    cfg = config or PaginationConfig()
    query = query or {}
    form = form or {}
    req = PaginationRequest(cfg.default_page, cfg.default_limit)

    page = _positive(query.get("page", ""))
    if page is not None:
        req.page = page
    limit = _positive(query.get("limit", ""))
    if limit is not None:
        req.limit = limit

    if req.page == cfg.default_page:
        page = _positive(form.get("page", ""))
        if page is not None:
            req.page = page
    if req.limit == cfg.default_limit:
        limit = _positive(form.get("limit", ""))
        if limit is not None:
            req.limit = limit

    if req.page == cfg.default_page or req.limit == cfg.default_limit:
        text = _as_text(body)
        parsed = None
        if content_type == "application/json":
            parsed = _json_values(text)
        elif content_type == "application/x-www-form-urlencoded":
            parsed = _form_values(text)
        if parsed is not None:
            body_page, body_limit = parsed
            if req.page == cfg.default_page and body_page > 0:
                req.page = body_page
            if req.limit == cfg.default_limit and body_limit > 0:
                req.limit = body_limit

        if content_type in ("text/plain", "") and text:
            page = _positive(extract_param(text, "page"))
            if page is not None and req.page == cfg.default_page:
                req.page = page
            limit = _positive(extract_param(text, "limit"))
            if limit is not None and req.limit == cfg.default_limit:
                req.limit = limit

    req.validate(cfg)
    return req