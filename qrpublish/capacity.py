# -*- coding: utf-8 -*-
"""
QR Code Capacity Module

Chooses the smallest version (1-40) that holds the encoded segments at the
requested error correction level and builds the padded data codewords.

Functions:
    select_version: Smallest version that fits the text
    build_data_codewords: Terminator, bit padding and pad codewords
"""

import logging
from typing import List, Optional, Sequence, Tuple

from .errors import CapacityExceededError, ValidationError
from .segments import BitBuffer, Segment, encode_segments, encoded_bit_length, segment_text, version_group

logger = logging.getLogger(__name__)

MIN_VERSION = 1
MAX_VERSION = 40

ECC_ORDINAL = {'L': 0, 'M': 1, 'Q': 2, 'H': 3}

PAD_CODEWORDS = (0xEC, 0x11)

# Total error correction codewords per version for levels (L, M, Q, H)
# ISO/IEC 18004:2015 table 9
ECC_CODEWORDS_TOTAL = (
    (7, 10, 13, 17), (10, 16, 22, 28), (15, 26, 36, 44), (20, 36, 52, 64),
    (26, 48, 72, 88), (36, 64, 96, 112), (40, 72, 108, 130), (48, 88, 132, 156),
    (60, 110, 160, 192), (72, 130, 192, 224), (80, 150, 224, 264), (96, 176, 260, 308),
    (104, 198, 288, 352), (120, 216, 320, 384), (132, 240, 360, 432), (144, 280, 408, 480),
    (168, 308, 448, 532), (180, 338, 504, 588), (196, 364, 546, 650), (224, 416, 600, 700),
    (224, 442, 644, 750), (252, 476, 690, 816), (270, 504, 750, 900), (300, 560, 810, 960),
    (312, 588, 870, 1050), (336, 644, 952, 1110), (360, 700, 1020, 1200), (390, 728, 1050, 1260),
    (420, 784, 1140, 1350), (450, 812, 1200, 1440), (480, 868, 1290, 1530), (510, 924, 1350, 1620),
    (540, 980, 1440, 1710), (570, 1036, 1530, 1800), (570, 1064, 1590, 1890), (600, 1120, 1680, 1980),
    (630, 1204, 1770, 2100), (660, 1260, 1860, 2220), (720, 1316, 1950, 2310), (750, 1372, 2040, 2430),
)

# Number of error correction blocks per version for levels (L, M, Q, H)
NUM_BLOCKS = (
    (1, 1, 1, 1), (1, 1, 1, 1), (1, 1, 2, 2), (1, 2, 2, 4), (1, 2, 4, 4),
    (2, 4, 4, 4), (2, 4, 6, 5), (2, 4, 6, 6), (2, 5, 8, 8), (4, 5, 8, 8),
    (4, 5, 8, 11), (4, 8, 10, 11), (4, 9, 12, 16), (4, 9, 16, 16), (6, 10, 12, 18),
    (6, 10, 17, 16), (6, 11, 16, 19), (6, 13, 18, 21), (7, 14, 21, 25), (8, 16, 20, 25),
    (8, 17, 23, 25), (9, 17, 23, 34), (9, 18, 25, 30), (10, 20, 27, 32), (12, 21, 29, 35),
    (12, 23, 34, 37), (12, 25, 34, 40), (13, 26, 35, 42), (14, 28, 38, 45), (15, 29, 40, 48),
    (16, 31, 43, 51), (17, 33, 45, 54), (18, 35, 48, 57), (19, 37, 51, 60), (19, 38, 53, 63),
    (20, 40, 56, 66), (21, 43, 59, 70), (22, 45, 62, 74), (24, 47, 65, 77), (25, 49, 68, 81),
)


def _check(version: int, ecc: str) -> None:
    if not MIN_VERSION <= version <= MAX_VERSION:
        raise ValueError(f"Version must be between 1 and 40, got {version}")
    if ecc not in ECC_ORDINAL:
        raise ValueError(f"Unknown error correction level {ecc!r}")


def raw_data_modules(version: int) -> int:
    """
    Number of modules left for codewords (and remainder bits) once all
    function patterns, format and version information are placed.
    """
    result = (16 * version + 128) * version + 64
    if version >= 2:
        num_align = version // 7 + 2
        result -= (25 * num_align - 10) * num_align - 55
        if version >= 7:
            result -= 36
    return result


def total_codewords(version: int) -> int:
    return raw_data_modules(version) // 8


def remainder_bits(version: int) -> int:
    return raw_data_modules(version) % 8


def ecc_codewords(version: int, ecc: str) -> int:
    _check(version, ecc)
    return ECC_CODEWORDS_TOTAL[version - 1][ECC_ORDINAL[ecc]]


def num_blocks(version: int, ecc: str) -> int:
    _check(version, ecc)
    return NUM_BLOCKS[version - 1][ECC_ORDINAL[ecc]]


def data_codewords(version: int, ecc: str) -> int:
    """Number of 8-bit data codewords a (version, ecc) symbol holds."""
    return total_codewords(version) - ecc_codewords(version, ecc)


def data_capacity_bits(version: int, ecc: str) -> int:
    return data_codewords(version, ecc) * 8


def select_version(
    text: str,
    ecc: str = 'M',
    version: Optional[int] = None
) -> Tuple[int, List[Segment]]:
    """
    Find the smallest version that holds `text` at level `ecc`.

    Segmentation depends on the count indicator widths, so it is computed
    once per version group and reused for every version in that group.

    Args:
        text (str): Non-empty input text
        ecc (str): Error correction level ('L', 'M', 'Q', 'H')
        version (Optional[int]): Force this version instead of searching

    Returns:
        Tuple[int, List[Segment]]: (version, segments)

    Raises:
        ValidationError: If text is empty
        CapacityExceededError: If no allowed version holds the text

    Example:
        >>> select_version("HELLO WORLD", "Q")[0]
        1
    """
    if not text:
        raise ValidationError("Text to encode must not be empty")
    if ecc not in ECC_ORDINAL:
        raise ValidationError(f"Unknown error correction level {ecc!r}")

    candidates = range(MIN_VERSION, MAX_VERSION + 1) if version is None else [version]
    by_group = {}
    required = None
    for ver in candidates:
        group = version_group(ver)
        if group not in by_group:
            by_group[group] = segment_text(text, ver)
        segments = by_group[group]
        required = encoded_bit_length(segments, ver)
        if required <= data_capacity_bits(ver, ecc):
            return ver, segments

    last = candidates[-1]
    if version is None:
        message = (f"Text needs {required} bits, more than version {last} holds at level {ecc} "
                   f"({data_capacity_bits(last, ecc)} bits); use a lower error correction level "
                   f"or shorten the text")
    else:
        message = (f"Text needs {required} bits, more than the requested version {last} holds "
                   f"at level {ecc} ({data_capacity_bits(last, ecc)} bits)")
    logger.info(message)
    raise CapacityExceededError(message, ecc=ecc, required_bits=required)


def build_data_codewords(segments: Sequence[Segment], version: int, ecc: str) -> List[int]:
    """
    Serialize segments and pad them to the exact data capacity.

    Appends a terminator of up to four zero bits, zero bits up to the next
    codeword boundary, then alternating 0xEC / 0x11 pad codewords.
    """
    capacity = data_capacity_bits(version, ecc)
    bits: BitBuffer = encode_segments(segments, version)
    if len(bits) > capacity:
        raise CapacityExceededError(
            f"Encoded data ({len(bits)} bits) exceeds capacity ({capacity} bits)",
            ecc=ecc, required_bits=len(bits))

    bits.append_bits(0, min(4, capacity - len(bits)))
    bits.append_bits(0, -len(bits) % 8)

    codewords = bits.to_codewords()
    pad_index = 0
    while len(codewords) < capacity // 8:
        codewords.append(PAD_CODEWORDS[pad_index % 2])
        pad_index += 1
    return codewords
