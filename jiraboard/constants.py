"""Shared context keys, header names, messages and permission slugs."""

from __future__ import annotations

from enum import Enum


class ContextKey(str, Enum):
    """Keys under which request-scoped values are stored."""

    REQUEST_ID = "request_id"
    USER_ID = "user_id"
    USER_NAME = "user_name"
    TOKEN_HASH = "token_hash"
    SESSION_ID = "session_id"
    STORE_ID = "store_id"


HEADER_REQUEST_ID = "X-Request-Id"
HEADER_SERVICE_NAME = "X-Service-Name"

MSG_SUCCESS = "Success"
MSG_RESOURCE_CREATED_SUCCESSFULLY = "Resource created successfully"
MSG_OPERATION_COMPLETED_SUCCESSFULLY = "Operation completed successfully"

MSG_INVALID_REQUEST_BODY = "Invalid request body"
MSG_UNAUTHORIZED = "Unauthorized"
MSG_FORBIDDEN = "Forbidden"
MSG_RESOURCE_NOT_FOUND = "Not found"
MSG_INTERNAL_SERVER_ERROR = "Whoops! Something went wrong"
MSG_ACCOUNT_LOCKED = "Account is temporarily locked due to multiple failed login attempts"
MSG_ACCOUNT_DISABLED = "Account is disabled"
MSG_INVALID_CREDENTIAL = "Invalid credential"
MSG_FEATURE_NOT_IMPLEMENTED = "Feature not implemented"
MSG_UNAUTHORIZED_ACCESS = "Anda tidak memiliki akses untuk data tersebut"

PERMISSION_FOO_LIST = "foo.list"
PERMISSION_FOO_GET = "foo.get"
PERMISSION_FOO_CREATE = "foo.create"
PERMISSION_FOO_UPDATE = "foo.update"
PERMISSION_FOO_DELETE = "foo.delete"

PERMISSION_BAR_LIST = "bar.list"
PERMISSION_BAR_GET = "bar.get"
PERMISSION_BAR_CREATE = "bar.create"
PERMISSION_BAR_UPDATE = "bar.update"
PERMISSION_BAR_DELETE = "bar.delete"