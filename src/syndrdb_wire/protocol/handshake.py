"""Protocol version handshake.

The client opens with a single ``PROTOCOL_VERSION <n>`` frame and the
server answers once::

    PROTOCOL_OK 2                        accepted
    PROTOCOL_ERROR unsupported_version   rejected, with a reason

There is no second round.
"""

from __future__ import annotations

from .exceptions import EmptyFrameError, MalformedReplyError, VersionMismatchError
from .framing import EOT, strip_terminator

PROTOCOL_VERSION = 2

PROTOCOL_OK = "PROTOCOL_OK"
PROTOCOL_ERROR = "PROTOCOL_ERROR"


def build_handshake() -> bytes:
    """Build the ``PROTOCOL_VERSION`` frame announcing our wire version."""
    return f"PROTOCOL_VERSION {PROTOCOL_VERSION}".encode("ascii") + bytes([EOT])


def parse_handshake_reply(data: bytes) -> None:
    """Check the server's answer to :func:`build_handshake`.

    Any reply starting with ``PROTOCOL_OK`` is accepted; the version number
    that follows is not checked.

    Raises:
        EmptyFrameError: If ``data`` is empty.
        VersionMismatchError: If the server answered ``PROTOCOL_ERROR``.
        MalformedReplyError: For any other reply.
    """
    if not data:
        raise EmptyFrameError("version response")

    msg = strip_terminator(data).decode("utf-8", errors="surrogateescape")

    if msg.startswith(PROTOCOL_OK):
        return

    if msg.startswith(PROTOCOL_ERROR):
        # Skip the prefix and the single space after it
        raise VersionMismatchError(msg[len(PROTOCOL_ERROR) + 1:])

    raise MalformedReplyError(msg)
