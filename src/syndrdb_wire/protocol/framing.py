"""Outbound frame builder and parameter escaping.

Frame layout::

    +--------------+-----+-----------+-----+-----------+-----+-----+
    | Command text | ENQ | Param 1   | ENQ | Param 2   | ... | EOT |
    | verbatim     | 05  | escaped   | 05  | escaped   |     | 04  |
    +--------------+-----+-----------+-----+-----------+-----+-----+

- Command: written as-is, UTF-8 encoded
- ENQ (0x05): precedes every parameter, including empty ones
- Param: EOT and ENQ inside a value are doubled (04 -> 04 04, 05 -> 05 05)
- EOT (0x04): terminates the frame

Inbound frames carry a payload optionally followed by EOT; see
:mod:`.parser` for the decode side.
"""

from __future__ import annotations

from typing import Sequence

from ..utils.buffer_pool import BufferPool

EOT = 0x04
ENQ = 0x05

_EOT_CHAR = chr(EOT)
_ENQ_CHAR = chr(ENQ)
_ESCAPE_TRANS = str.maketrans({EOT: _EOT_CHAR * 2, ENQ: _ENQ_CHAR * 2})

_default_pool = BufferPool()


def _to_wire(text: str) -> bytes:
    """UTF-8 encode, keeping raw bytes smuggled in as surrogates.

    Text decoded with ``surrogateescape`` goes back to its original bytes;
    any other lone surrogate is written as its UTF-8 form.
    """
    try:
        return text.encode("utf-8", errors="surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", errors="surrogatepass")


def escape_parameter(param: str) -> str:
    """Double every EOT and ENQ in a parameter value.

    Values without reserved characters are returned unchanged (the same
    object), so the common case costs a single scan.
    """
    if _EOT_CHAR not in param and _ENQ_CHAR not in param:
        return param
    return param.translate(_ESCAPE_TRANS)


def build_frame(
    command: str,
    params: Sequence[str] = (),
    pool: BufferPool | None = None,
) -> bytes:
    """Encode a command and its parameters into a single wire frame.

    Args:
        command: Command text, written verbatim.
        params: Parameter values, written in order after the command.
        pool: Scratch buffer pool; the module-wide pool is used by default.

    Returns:
        An independent ``bytes`` object ending in EOT.
    """
    pool = pool if pool is not None else _default_pool
    with pool.acquire() as buf:
        buf += _to_wire(command)
        for param in params:
            buf.append(ENQ)
            buf += _to_wire(escape_parameter(param))
        buf.append(EOT)
        # Copy out before the buffer goes back to the pool
        frame = bytes(buf)
    return frame


def strip_terminator(data: bytes) -> bytes:
    """Drop a single trailing EOT, if present."""
    if data and data[-1] == EOT:
        return data[:-1]
    return data
