# -*- coding: utf-8 -*-
import pytest

from qrpublish.errors import UnsupportedCharacterError
from qrpublish.segments import (
    MODE_ALPHANUMERIC,
    MODE_BYTE,
    MODE_NUMERIC,
    BitBuffer,
    Segment,
    char_count_bits,
    encode_segments,
    encoded_bit_length,
    segment_text,
)


def modes(text, version=1):
    return [seg.mode for seg in segment_text(text, version)]


def test_single_mode_inputs():
    assert modes("01234567") == [MODE_NUMERIC]
    assert modes("HELLO WORLD") == [MODE_ALPHANUMERIC]
    assert modes("hello") == [MODE_BYTE]


def test_long_runs_keep_their_own_mode():
    assert modes("ABC1234567890") == [MODE_ALPHANUMERIC, MODE_NUMERIC]
    assert modes("hello 12345678901234567890") == [MODE_BYTE, MODE_NUMERIC]


def test_short_runs_are_absorbed():
    assert modes("a1b") == [MODE_BYTE]
    assert modes("A1B") == [MODE_ALPHANUMERIC]
    assert modes("https://example.com") == [MODE_BYTE]


@pytest.mark.parametrize("text", [
    "https://example.com/images/1712345678901-k3j9xq.png",
    "HELLO 123 world 4567890 !!",
    "héllo wörld 42",
    "0",
])
def test_segments_cover_input_without_gaps(text):
    for version in (1, 10, 27):
        segments = segment_text(text, version)
        assert ''.join(seg.text for seg in segments) == text
        assert all(seg.text for seg in segments)


def test_numeric_run_is_cheaper_than_one_byte_segment():
    text = "hello 12345678901234567890"
    single = Segment(MODE_BYTE, text).bit_length(1)
    assert single == 220
    assert encoded_bit_length(segment_text(text, 1), 1) == 141


def test_byte_mode_counts_utf8_bytes():
    seg = segment_text("héllo", 1)[0]
    assert seg.mode == MODE_BYTE
    assert seg.char_count == 6
    assert seg.bit_length(1) == 4 + 8 + 6 * 8


def test_lone_surrogate_is_rejected():
    with pytest.raises(UnsupportedCharacterError):
        segment_text("ab\ud800", 1)


def test_count_indicator_widths():
    assert [char_count_bits(MODE_NUMERIC, v) for v in (9, 10, 26, 27)] == [10, 12, 12, 14]
    assert [char_count_bits(MODE_ALPHANUMERIC, v) for v in (1, 10, 40)] == [9, 11, 13]
    assert [char_count_bits(MODE_BYTE, v) for v in (1, 10, 40)] == [8, 16, 16]


def test_alphanumeric_bit_stream():
    bits = encode_segments(segment_text("HELLO WORLD", 1), 1)
    assert len(bits) == 74
    expected = "0010" "000001011" "01100001011" "01111000110" "10001011100" "10110111000" "10011010100" "001101"
    assert ''.join(map(str, bits)) == expected


def test_numeric_bit_stream():
    bits = encode_segments(segment_text("01234567", 1), 1)
    expected = "0001" "0000001000" "0000001100" "0101011001" "1000011"
    assert ''.join(map(str, bits)) == expected


def test_bit_buffer():
    bits = BitBuffer()
    bits.append_bits(0xEC, 8)
    bits.append_bits(0x11, 8)
    assert bits.to_codewords() == [0xEC, 0x11]
    with pytest.raises(ValueError):
        bits.append_bits(4, 2)
    bits.append_bits(1, 1)
    with pytest.raises(ValueError):
        bits.to_codewords()
