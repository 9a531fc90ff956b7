"""MCP server exposing the SyndrDB wire codec.

Lets another process or runtime build and inspect protocol frames
without linking the codec directly. Frames travel as hex strings; every
failure is returned as a serialized transport error so the caller can
decide whether to retry.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .config import BridgeConfig, load_config
from .protocol.errors import (
    ErrorCode,
    TransportError,
    bridge_init_error,
    deserialize,
    is_retryable,
    protocol_error,
    serialize,
)
from .protocol.exceptions import (
    MalformedErrorPayload,
    MalformedReplyError,
    VersionMismatchError,
)
from .protocol.framing import ENQ, EOT, build_frame
from .protocol.handshake import PROTOCOL_VERSION, build_handshake, parse_handshake_reply
from .protocol.parser import parse_response

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "syndrdb-wire",
    instructions="Encode and decode SyndrDB wire protocol frames",
)

_config = BridgeConfig()


def _error(err: TransportError) -> dict[str, Any]:
    """Wrap a transport error as a tool result."""
    logger.warning("Rejected call: %s", err)
    return {"error": err.to_dict()}


def _frame_from_hex(frame_hex: str) -> bytes:
    try:
        return bytes.fromhex(frame_hex)
    except ValueError as e:
        raise ValueError(f"frame_hex is not valid hex: {e}") from e


# ─── FRAME TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def encode_command(command: str, params: list[str] | None = None) -> dict[str, Any]:
    """Encode a command and its parameters into a wire frame.

    Args:
        command: Command text, e.g. 'SELECT DOCUMENTS FROM "users"'.
        params: Optional ordered parameter values.
    """
    params = params or []
    if len(params) > _config.max_param_count:
        return _error(protocol_error(
            "too many parameters",
            {"paramCount": len(params), "max": _config.max_param_count},
        ))

    frame = build_frame(command, params)
    return {"frame_hex": frame.hex(), "length": len(frame)}


@mcp.tool()
def decode_response(frame_hex: str) -> dict[str, Any]:
    """Decode a server response frame.

    JSON replies are returned field by field; plain-text replies come
    back as a successful response with the text in 'message'.

    Args:
        frame_hex: The raw response bytes as a hex string.
    """
    try:
        response = parse_response(_frame_from_hex(frame_hex))
    except ValueError as e:
        return _error(protocol_error(str(e)))
    return response.to_dict()


# ─── HANDSHAKE TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def handshake_frame() -> dict[str, Any]:
    """Build the protocol version handshake frame."""
    frame = build_handshake()
    return {"frame_hex": frame.hex(), "version": PROTOCOL_VERSION}


@mcp.tool()
def check_handshake_reply(frame_hex: str) -> dict[str, Any]:
    """Check the server's reply to the version handshake.

    Args:
        frame_hex: The raw reply bytes as a hex string.
    """
    try:
        parse_handshake_reply(_frame_from_hex(frame_hex))
    except VersionMismatchError as e:
        return _error(e.to_transport_error())
    except MalformedReplyError as e:
        return _error(protocol_error(str(e), {"reply": e.reply}))
    except ValueError as e:
        return _error(protocol_error(str(e)))
    return {"ok": True, "version": PROTOCOL_VERSION}


# ─── ERROR TOOLS ─────────────────────────────────────────────────────

@mcp.tool()
def describe_error(payload: str) -> dict[str, Any]:
    """Decode a serialized transport error and classify it.

    Args:
        payload: The JSON error object as produced by the codec.
    """
    try:
        err = deserialize(payload)
    except MalformedErrorPayload as e:
        return _error(protocol_error(str(e)))

    result = err.to_dict()
    result["name"] = err.code.name
    result["category"] = err.code.category
    return result


# ─── RESOURCES ───────────────────────────────────────────────────────

@mcp.resource("syndrdb://protocol/info")
def resource_protocol_info() -> str:
    """Wire constants and the error code table."""
    codes = [
        {
            "code": code.value,
            "name": code.name,
            "category": code.category,
            "retryable": is_retryable(code),
        }
        for code in ErrorCode
    ]
    return json.dumps({
        "version": PROTOCOL_VERSION,
        "eot": f"0x{EOT:02X}",
        "enq": f"0x{ENQ:02X}",
        "error_codes": codes,
    })


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    global _config
    try:
        _config = load_config()
    except ValueError as e:
        raise SystemExit(serialize(bridge_init_error(str(e))).decode("utf-8")) from e

    logging.basicConfig(level=_config.numeric_log_level)
    logger.info(
        "Starting codec bridge (protocol v%d, max %d params)",
        PROTOCOL_VERSION,
        _config.max_param_count,
    )
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
