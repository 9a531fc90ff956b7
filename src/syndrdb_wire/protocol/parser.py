"""Response parsing for server messages.

Servers answer either with a JSON object or with a bare text line (for
example the ``S0001:: Welcome`` greeting). Both are accepted: anything
that is not a well-formed response object is wrapped as a successful
plain-text message.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from .exceptions import EmptyFrameError
from .framing import strip_terminator

logger = logging.getLogger(__name__)

# Optional string fields of the JSON response object
_TEXT_FIELDS = ("message", "error", "code")


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(f"invalid JSON constant {name}")


@dataclass(frozen=True)
class Response:
    """A decoded server response."""

    data: Any = None
    success: bool = False
    message: str | None = None
    error: str | None = None
    code: str | None = None
    details: dict[str, Any] | None = None

    @property
    def failed(self) -> bool:
        return not self.success or self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible form; absent fields are omitted."""
        result: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            result["data"] = self.data
        for name in _TEXT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        if self.details:
            result["details"] = self.details
        return result


def _response_from_json(obj: Any) -> Response | None:
    """Build a Response from a decoded JSON value, or None if the shape is wrong."""
    if not isinstance(obj, dict):
        return None

    success = obj.get("success")
    if success is None:
        success = False
    elif not isinstance(success, bool):
        return None

    text: dict[str, str | None] = {}
    for name in _TEXT_FIELDS:
        value = obj.get(name)
        if value is not None and not isinstance(value, str):
            return None
        text[name] = value

    details = obj.get("details")
    if details is not None and not isinstance(details, dict):
        return None

    return Response(
        data=obj.get("data"),
        success=success,
        details=details,
        **text,
    )


def parse_response(data: bytes) -> Response:
    """Decode an inbound frame into a :class:`Response`.

    A trailing EOT is stripped if present. Payloads that are not a JSON
    response object never raise; they become
    ``Response(success=True, message=<text>)``.

    Raises:
        EmptyFrameError: If ``data`` is empty.
    """
    if not data:
        raise EmptyFrameError("response")

    payload = strip_terminator(data)
    text = payload.decode("utf-8", errors="surrogateescape")

    try:
        response = _response_from_json(json.loads(text, parse_constant=_reject_constant))
    except ValueError:
        response = None

    if response is None:
        logger.debug("Non-JSON response, treating as plain text: %.80r", text)
        return Response(success=True, message=text)
    return response
