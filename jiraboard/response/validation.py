"""Turning field validation failures into client-facing details."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

_MESSAGES = {
    "required": "{field} is required",
    "email": "{field} must be a valid email address",
    "min": "{field} must be at least {param} characters",
    "max": "{field} must not exceed {param} characters",
    "len": "{field} must be exactly {param} characters",
    "gt": "{field} must be greater than {param}",
    "gte": "{field} must be greater than or equal to {param}",
    "lt": "{field} must be less than {param}",
    "lte": "{field} must be less than or equal to {param}",
    "uuid": "{field} must be a valid UUID",
    "url": "{field} must be a valid URL",
    "alpha": "{field} must contain only alphabetic characters",
    "alphanum": "{field} must contain only alphanumeric characters",
    "numeric": "{field} must be numeric",
    "json": "{field} must be valid JSON",
    "oneof": "{field} must be one of: {param}",
}
_DEFAULT_MESSAGE = "{field} is invalid"


@dataclass(frozen=True)
class FieldError:
    """One failed validation rule on one field."""

    field: str
    tag: str
    value: Any = None
    param: str = ""


@dataclass(frozen=True)
class ValidationErrorDetail:
    """A validation failure as reported to the client."""

    field: str
    tag: str
    value: str
    message: str


def _format_value(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_validation_errors(errors: Any) -> list[ValidationErrorDetail]:
    """Convert field errors into details; anything else yields an empty list."""
    try:
        items: Iterable[Any] = iter(errors)
    except TypeError:
        return []
    details = []
    for item in items:
        if not isinstance(item, FieldError):
            continue
        field = item.field.lower()
        template = _MESSAGES.get(item.tag, _DEFAULT_MESSAGE)
        details.append(
            ValidationErrorDetail(
                field=field,
                tag=item.tag,
                value=_format_value(item.value),
                message=template.format(field=field, param=item.param),
            )
        )
    return details