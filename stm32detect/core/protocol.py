"""OpenOCD telnet wire helpers: commands, response cleanup, and IDCODE parsing."""

from __future__ import annotations

import re

# DBGMCU_IDCODE locations across STM32 families, in probe order.
IDCODE_ADDRESSES: tuple[int, ...] = (
    0xE0042000,
    0x40015800,
    0x5C001000,
    0xE0044000,
)

SENTINEL_IDCODES = frozenset({0x00000000, 0xFFFFFFFF})
DEVICE_ID_MASK = 0xFFF

_IAC = 0xFF
_IAC_SEQUENCE_LEN = 3
_SEPARATOR = ": "
_PROMPT = ">"
_HEX_VALUE_RE = re.compile(r"\s*(?:0[xX])?([0-9A-Fa-f]+)")


def format_read_command(address: int) -> bytes:
    """Serialize a single 32-bit memory read, CRLF-terminated."""
    return f"mdw 0x{address:08X}\r\n".encode("ascii")


def normalize_response(raw: bytes) -> str:
    """Strip telnet IAC sequences and NUL padding from raw bridge output."""
    cleaned = bytearray()
    index = 0
    while index < len(raw):
        byte = raw[index]
        if byte == _IAC:
            index += _IAC_SEQUENCE_LEN
            continue
        if byte != 0x00:
            cleaned.append(byte)
        index += 1
    return cleaned.decode("latin-1")


def is_response_complete(text: str) -> bool:
    if _SEPARATOR in text:
        return True
    if "\n" + _PROMPT in text:
        return True
    return text.rstrip().endswith(_PROMPT)


def parse_idcode(text: str) -> int | None:
    """Return the 32-bit value following the first ``": "``, or None when there is none."""
    position = text.find(_SEPARATOR)
    if position < 0:
        return None
    match = _HEX_VALUE_RE.match(text, position + len(_SEPARATOR))
    if not match:
        return None
    return int(match.group(1), 16) & 0xFFFFFFFF


def is_sentinel(idcode: int) -> bool:
    return idcode in SENTINEL_IDCODES


def device_id(idcode: int) -> int:
    return idcode & DEVICE_ID_MASK
