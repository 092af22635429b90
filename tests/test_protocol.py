from __future__ import annotations

import pytest

from stm32detect.core.protocol import (
    IDCODE_ADDRESSES,
    device_id,
    format_read_command,
    is_response_complete,
    is_sentinel,
    normalize_response,
    parse_idcode,
)


def test_probe_order_is_fixed() -> None:
    assert IDCODE_ADDRESSES == (0xE0042000, 0x40015800, 0x5C001000, 0xE0044000)


def test_read_command_is_crlf_terminated_ascii() -> None:
    assert format_read_command(0xE0042000) == b"mdw 0xE0042000\r\n"
    assert format_read_command(0x1) == b"mdw 0x00000001\r\n"


def test_normalize_strips_iac_sequences_and_nuls() -> None:
    raw = b"\xff\xfb\x01\xff\xfb\x03Open On-Chip Debugger\r\n\x00> "
    assert normalize_response(raw) == "Open On-Chip Debugger\r\n> "


def test_normalize_is_idempotent() -> None:
    raw = b"\xff\xfd\x1f0xe0042000: 20036410 \r\n\x00\x00>"
    once = normalize_response(raw)
    assert normalize_response(once.encode("latin-1")) == once


def test_injected_iac_sequence_matches_clean_text() -> None:
    clean = b"0xe0042000: 20036410 \r\n> "
    injected = clean[:5] + b"\xff\xfa\x18" + clean[5:]
    assert normalize_response(injected) == normalize_response(clean)


def test_trailing_iac_without_option_bytes_is_dropped() -> None:
    assert normalize_response(b"> \xff") == "> "
    assert normalize_response(b"> \xff\xfb") == "> "


@pytest.mark.parametrize(
    "text",
    [
        "0xe0042000: 20036410",
        "mdw 0xE0042000\r\n>",
        "Open On-Chip Debugger\r\n> ",
        ">",
    ],
)
def test_completion_markers(text: str) -> None:
    assert is_response_complete(text)


@pytest.mark.parametrize("text", ["", "mdw 0xE0042000\r\n", "0xe0042000:"])
def test_incomplete_responses(text: str) -> None:
    assert not is_response_complete(text)


def test_parse_idcode_with_prefix_and_prompt() -> None:
    idcode = parse_idcode("0xE0042000: 0x20036410\n>")
    assert idcode == 0x20036410
    assert device_id(idcode) == 0x410


def test_parse_idcode_openocd_style_without_prefix() -> None:
    assert parse_idcode("mdw 0xE0042000\r\n0xe0042000: 10016413 \r\n> ") == 0x10016413


def test_parse_idcode_without_separator_is_absent() -> None:
    assert parse_idcode("mdw 0xE0042000\r\n> ") is None
    assert parse_idcode("") is None


def test_parse_idcode_non_hex_is_absent() -> None:
    assert parse_idcode(": ZZZZ") is None


def test_sentinels() -> None:
    assert is_sentinel(0x00000000)
    assert is_sentinel(0xFFFFFFFF)
    assert not is_sentinel(0x20036410)
