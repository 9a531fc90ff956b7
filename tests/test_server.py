"""Tests for the MCP codec bridge tools."""

from __future__ import annotations

import json
import sys
from unittest.mock import MagicMock, patch

import pytest

from syndrdb_wire.config import BridgeConfig
from syndrdb_wire.protocol.errors import ErrorCode, serialize, timeout_error


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the @mcp.tool() decorator a no-op that returns the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch.dict(sys.modules, {}):
        with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
            sys.modules.pop("syndrdb_wire.server", None)
            import syndrdb_wire.server as server_mod

    return server_mod


@pytest.fixture
def server():
    return _get_server_module()


def test_encode_command(server):
    result = server.encode_command("CMD", ["a", "b"])
    assert bytes.fromhex(result["frame_hex"]) == b"CMD\x05a\x05b\x04"
    assert result["length"] == 8


def test_encode_command_without_params(server):
    result = server.encode_command("PING")
    assert bytes.fromhex(result["frame_hex"]) == b"PING\x04"


def test_encode_command_too_many_params(server, monkeypatch):
    monkeypatch.setattr(server, "_config", BridgeConfig(max_param_count=2))
    result = server.encode_command("CMD", ["1", "2", "3"])
    assert result["error"]["code"] == ErrorCode.PROTOCOL_ERROR
    assert result["error"]["details"] == {"paramCount": 3, "max": 2}
    assert result["error"]["isRetryable"] is False


def test_decode_json_response(server):
    frame = b'{"success":true,"data":{"id":1}}\x04'
    result = server.decode_response(frame.hex())
    assert result == {"success": True, "data": {"id": 1}}


def test_decode_plain_text_response(server):
    result = server.decode_response(b"S0001:: Welcome".hex())
    assert result == {"success": True, "message": "S0001:: Welcome"}


def test_decode_empty_frame(server):
    result = server.decode_response("")
    assert result["error"]["code"] == ErrorCode.PROTOCOL_ERROR
    assert result["error"]["isRetryable"] is False


def test_decode_invalid_hex(server):
    result = server.decode_response("zz")
    assert result["error"]["code"] == ErrorCode.PROTOCOL_ERROR
    assert "hex" in result["error"]["message"]


def test_handshake_frame(server):
    result = server.handshake_frame()
    assert bytes.fromhex(result["frame_hex"]) == b"PROTOCOL_VERSION 2\x04"
    assert result["version"] == 2


def test_check_handshake_ok(server):
    assert server.check_handshake_reply(b"PROTOCOL_OK 2\x04".hex()) == {
        "ok": True,
        "version": 2,
    }


def test_check_handshake_mismatch(server):
    result = server.check_handshake_reply(b"PROTOCOL_ERROR unsupported_version\x04".hex())
    assert result["error"]["code"] == ErrorCode.PROTOCOL_VERSION_MISMATCH
    assert result["error"]["message"] == "unsupported_version"


def test_check_handshake_malformed(server):
    result = server.check_handshake_reply(b"HELLO\x04".hex())
    assert result["error"]["code"] == ErrorCode.PROTOCOL_ERROR
    assert result["error"]["details"] == {"reply": "HELLO"}


def test_describe_error(server):
    payload = serialize(timeout_error("read timed out")).decode()
    result = server.describe_error(payload)
    assert result["code"] == 1002
    assert result["name"] == "TIMEOUT"
    assert result["category"] == "connection"
    assert result["isRetryable"] is True


def test_describe_malformed_error(server):
    result = server.describe_error("{}")
    assert result["error"]["code"] == ErrorCode.PROTOCOL_ERROR


def test_protocol_info_resource(server):
    info = json.loads(server.resource_protocol_info())
    assert info["version"] == 2
    assert info["eot"] == "0x04"
    assert info["enq"] == "0x05"
    by_name = {c["name"]: c for c in info["error_codes"]}
    assert by_name["BACKPRESSURE"]["retryable"] is True
    assert by_name["AUTH_FAILED"]["retryable"] is False
    assert len(by_name) == len(ErrorCode)


def test_main_runs_stdio(server, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("SYNDRDB_WIRE_LOG_LEVEL", raising=False)
    monkeypatch.setenv("SYNDRDB_WIRE_MAX_PARAMS", "64")
    server.main()
    server.mcp.run.assert_called_once_with(transport="stdio")
    assert server._config.max_param_count == 64


def test_main_reports_init_error(server, monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SYNDRDB_WIRE_LOG_LEVEL", "LOUD")
    with pytest.raises(SystemExit) as exc_info:
        server.main()
    payload = json.loads(exc_info.value.code)
    assert payload["code"] == ErrorCode.BRIDGE_INIT_FAILED
    assert payload["isRetryable"] is False
    server.mcp.run.assert_not_called()
