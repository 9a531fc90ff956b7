"""Failure kinds raised by the codec itself.

These are distinct from :class:`~syndrdb_wire.protocol.errors.TransportError`,
which classifies failures at the transport boundary.
"""

from __future__ import annotations


class WireProtocolError(Exception):
    """Base class for codec-level failures."""


class EmptyFrameError(WireProtocolError, ValueError):
    """Raised when a decoder is handed zero bytes."""

    def __init__(self, what: str = "response") -> None:
        super().__init__(f"empty {what} data")
        self.what = what


class HandshakeError(WireProtocolError):
    """Base class for failures while settling the protocol version."""


class VersionMismatchError(HandshakeError):
    """The server explicitly rejected our protocol version."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"protocol version mismatch: {reason}")
        self.reason = reason

    def to_transport_error(self):
        """Report this rejection as a ``PROTOCOL_VERSION_MISMATCH`` transport error."""
        from .errors import version_mismatch_error

        return version_mismatch_error(self.reason)


class MalformedReplyError(HandshakeError):
    """The handshake reply was neither ``PROTOCOL_OK`` nor ``PROTOCOL_ERROR``."""

    def __init__(self, reply: str) -> None:
        super().__init__(f"unexpected version response: {reply}")
        self.reply = reply


class MalformedErrorPayload(WireProtocolError, ValueError):
    """A serialized transport error could not be reconstructed."""
