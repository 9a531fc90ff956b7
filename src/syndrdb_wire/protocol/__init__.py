"""Protocol layer: frame encoding, response decoding, version handshake, and error taxonomy."""

from .framing import EOT, ENQ, build_frame, escape_parameter, strip_terminator
from .parser import Response, parse_response
from .handshake import PROTOCOL_VERSION, build_handshake, parse_handshake_reply
from .errors import ErrorCode, TransportError, is_retryable, serialize, deserialize
from .exceptions import (
    WireProtocolError,
    EmptyFrameError,
    HandshakeError,
    VersionMismatchError,
    MalformedReplyError,
    MalformedErrorPayload,
)
