"""Transport error taxonomy.

Error codes are grouped by concern::

    1000-1099  connection
    2000-2099  protocol
    3000-3099  query
    9000-9999  bridge internals

Whether an error may be retried depends on its code alone.
:func:`is_retryable` is the only place that decision is made.
"""

from __future__ import annotations

import json
from enum import IntEnum
from typing import Any, Mapping

from .exceptions import MalformedErrorPayload


class ErrorCode(IntEnum):
    """Standardized error codes shared across transport layers."""

    CONNECTION_REFUSED = 1001
    TIMEOUT = 1002
    AUTH_FAILED = 1003
    PROTOCOL_VERSION_MISMATCH = 1004
    BACKPRESSURE = 1010

    PROTOCOL_ERROR = 2001

    QUERY_ERROR = 3001

    BRIDGE_BUSY = 9001
    BRIDGE_CALLBACK_MISSING = 9002
    BRIDGE_INIT_FAILED = 9999

    @property
    def category(self) -> str:
        """Concern group derived from the numeric range."""
        if 1000 <= self.value <= 1099:
            return "connection"
        if 2000 <= self.value <= 2099:
            return "protocol"
        if 3000 <= self.value <= 3099:
            return "query"
        return "bridge"


RETRYABLE_CODES: frozenset[ErrorCode] = frozenset({
    ErrorCode.TIMEOUT,
    ErrorCode.BACKPRESSURE,
    ErrorCode.BRIDGE_BUSY,
    ErrorCode.BRIDGE_CALLBACK_MISSING,
})


def is_retryable(code: ErrorCode | int) -> bool:
    """Return True if a failure with this code may safely be re-attempted."""
    return code in RETRYABLE_CODES


class TransportError(Exception):
    """A classified failure at the transport boundary.

    ``is_retryable`` is derived from ``code`` when the error is built and
    cannot be set independently, except when reconstructing an error that
    was serialized elsewhere (see :meth:`from_dict`).
    """

    def __init__(
        self,
        code: ErrorCode | int,
        message: str,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        self._code = ErrorCode(code)
        self._message = message
        self._details: dict[str, Any] = dict(details) if details else {}
        self._retryable = is_retryable(self._code)
        super().__init__(self._code, message, self._details)

    @property
    def code(self) -> ErrorCode:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def details(self) -> dict[str, Any]:
        return dict(self._details)

    @property
    def is_retryable(self) -> bool:
        return self._retryable

    def __str__(self) -> str:
        if self._details:
            details_json = json.dumps(self._details, separators=(",", ":"))
            return f"[{self._code.value}] {self._message} (details: {details_json})"
        return f"[{self._code.value}] {self._message}"

    def __repr__(self) -> str:
        return (
            f"TransportError(code={self._code.name}, "
            f"message={self._message!r}, retryable={self._retryable})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Wire representation; ``details`` is omitted when empty."""
        result: dict[str, Any] = {
            "code": self._code.value,
            "message": self._message,
        }
        if self._details:
            result["details"] = dict(self._details)
        result["isRetryable"] = self._retryable
        return result

    @classmethod
    def from_dict(cls, obj: Mapping[str, Any]) -> TransportError:
        """Rebuild an error from its wire representation.

        The sender's ``isRetryable`` flag is kept as sent.

        Raises:
            MalformedErrorPayload: If a field is missing, ill-typed, or the
                code is not a known :class:`ErrorCode`.
        """
        code = obj.get("code")
        if isinstance(code, bool) or not isinstance(code, int):
            raise MalformedErrorPayload(f"error code must be an integer, got {code!r}")
        try:
            code = ErrorCode(code)
        except ValueError:
            raise MalformedErrorPayload(f"unknown error code {code}") from None

        message = obj.get("message")
        if not isinstance(message, str):
            raise MalformedErrorPayload("error message must be a string")

        details = obj.get("details")
        if details is not None and not isinstance(details, dict):
            raise MalformedErrorPayload("error details must be an object")

        retryable = obj.get("isRetryable")
        if retryable is not None and not isinstance(retryable, bool):
            raise MalformedErrorPayload("isRetryable must be a boolean")

        error = cls(code, message, details)
        if retryable is not None:
            error._retryable = retryable
        return error


def serialize(error: TransportError) -> bytes:
    """Encode an error as compact UTF-8 JSON for crossing a process boundary."""
    return json.dumps(error.to_dict(), separators=(",", ":")).encode("utf-8")


def deserialize(data: bytes | str) -> TransportError:
    """Decode an error produced by :func:`serialize`.

    Raises:
        MalformedErrorPayload: If the payload is not a valid error object.
    """
    try:
        obj = json.loads(data)
    except (ValueError, TypeError) as exc:
        raise MalformedErrorPayload(f"invalid error payload: {exc}") from exc
    if not isinstance(obj, dict):
        raise MalformedErrorPayload(
            f"error payload must be a JSON object, got {type(obj).__name__}"
        )
    return TransportError.from_dict(obj)


# ─── CONSTRUCTORS ─────────────────────────────────────────────────────

def connection_error(
    message: str, details: Mapping[str, Any] | None = None
) -> TransportError:
    return TransportError(ErrorCode.CONNECTION_REFUSED, message, details)


def timeout_error(
    message: str, details: Mapping[str, Any] | None = None
) -> TransportError:
    return TransportError(ErrorCode.TIMEOUT, message, details)


def auth_error(
    message: str, details: Mapping[str, Any] | None = None
) -> TransportError:
    return TransportError(ErrorCode.AUTH_FAILED, message, details)


def version_mismatch_error(
    message: str, details: Mapping[str, Any] | None = None
) -> TransportError:
    return TransportError(ErrorCode.PROTOCOL_VERSION_MISMATCH, message, details)


def protocol_error(
    message: str, details: Mapping[str, Any] | None = None
) -> TransportError:
    return TransportError(ErrorCode.PROTOCOL_ERROR, message, details)


def query_error(
    message: str, details: Mapping[str, Any] | None = None
) -> TransportError:
    return TransportError(ErrorCode.QUERY_ERROR, message, details)


def backpressure_error(queue_depth: int) -> TransportError:
    """The outbound queue is full; ``queue_depth`` is reported as ``queueDepth``."""
    return TransportError(
        ErrorCode.BACKPRESSURE, "message queue full", {"queueDepth": queue_depth}
    )


def bridge_busy_error() -> TransportError:
    return TransportError(ErrorCode.BRIDGE_BUSY, "bridge busy, retry later")


def bridge_callback_missing_error(name: str) -> TransportError:
    return TransportError(
        ErrorCode.BRIDGE_CALLBACK_MISSING, "bridge callback missing", {"callback": name}
    )


def bridge_init_error(message: str) -> TransportError:
    return TransportError(ErrorCode.BRIDGE_INIT_FAILED, message)
