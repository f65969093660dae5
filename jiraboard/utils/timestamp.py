"""Time and decimal parsing helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation

try:
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
except ImportError:  # pragma: no cover
    ZoneInfo = None  # type: ignore[assignment,misc]
    ZoneInfoNotFoundError = Exception  # type: ignore[assignment,misc]

_JAKARTA_FALLBACK = timezone(timedelta(hours=7), "WIB")


def now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(timezone.utc)


def _jakarta_zone():
    if ZoneInfo is None:
        return _JAKARTA_FALLBACK
    try:
        return ZoneInfo("Asia/Jakarta")
    except (ZoneInfoNotFoundError, ValueError):
        return _JAKARTA_FALLBACK


def time_jakarta() -> datetime:
    """Return the current time in the Asia/Jakarta zone."""
    return datetime.now(_jakarta_zone())


def parse_decimal(text: str) -> Decimal:
    """Parse a decimal number; anything unparsable yields zero."""
    if not text or text != text.strip() or "_" in text:
        return Decimal(0)
    try:
        value = Decimal(text)
    except (InvalidOperation, ValueError):
        return Decimal(0)
    if not value.is_finite():
        return Decimal(0)
    return value