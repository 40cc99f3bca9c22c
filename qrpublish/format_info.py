# -*- coding: utf-8 -*-
"""
QR Code Format and Version Information Module

Format information is 15 bits: 2 bits of error correction level and 3 bits of
mask pattern, protected by a BCH(15,5) code and XOR-ed with 0x5412. Version
information (v7+) is 18 bits: the 6-bit version protected by a BCH(18,6) code.

Both codes have a minimum distance of 7 or more, so reading the nearest valid
codeword recovers the value with up to 3 modules misread.
"""

from typing import Dict, List, Tuple

from .functional_areas import Matrix, format_info_cells, version_info_cells

FORMAT_GENERATOR = 0x537
FORMAT_MASK = 0x5412
VERSION_GENERATOR = 0x1F25

# Error correction level indicator bits (ISO/IEC 18004:2015 table 12)
ECC_BITS = {'L': 0b01, 'M': 0b00, 'Q': 0b11, 'H': 0b10}
ECC_MAP = {bits: level for level, bits in ECC_BITS.items()}


def _bch_remainder(value: int, generator: int) -> int:
    degree = generator.bit_length() - 1
    rem = value << degree
    for shift in range(rem.bit_length() - generator.bit_length(), -1, -1):
        if rem & (1 << (shift + degree)):
            rem ^= generator << shift
    return rem


def format_bits(ecc: str, mask: int) -> int:
    """
    15-bit format information for (ecc, mask), masked with 0x5412.

    Example:
        >>> hex(format_bits('M', 0))
        '0x5412'
    """
    if ecc not in ECC_BITS or not 0 <= mask <= 7:
        raise ValueError(f"Invalid format information ({ecc!r}, {mask!r})")
    data = (ECC_BITS[ecc] << 3) | mask
    return ((data << 10) | _bch_remainder(data, FORMAT_GENERATOR)) ^ FORMAT_MASK


def version_bits(version: int) -> int:
    """18-bit version information; only defined for versions 7-40."""
    if not 7 <= version <= 40:
        raise ValueError(f"Version information only exists for versions 7-40, got {version}")
    return (version << 12) | _bch_remainder(version, VERSION_GENERATOR)


# All 32 valid format codewords, keyed by (ecc, mask)
FORMAT_CODEWORDS: Dict[Tuple[str, int], int] = {
    (level, mask): format_bits(level, mask) for level in ECC_BITS for mask in range(8)
}


def hamming(a: int, b: int) -> int:
    return bin(a ^ b).count('1')


def decode_format_bits(bits: int) -> Tuple[str, int, int]:
    """
    Find the valid format codeword nearest to `bits`.

    Returns:
        Tuple[str, int, int]: (ecc, mask, distance), distance 0 being an exact match
    """
    best_key, best_d = None, None
    for key, codeword in FORMAT_CODEWORDS.items():
        d = hamming(bits, codeword)
        if best_d is None or d < best_d:
            best_key, best_d = key, d
    return best_key[0], best_key[1], best_d


def decode_version_bits(bits: int) -> Tuple[int, int]:
    """(version, distance) of the valid version codeword nearest to `bits`."""
    return min(((v, hamming(bits, version_bits(v))) for v in range(7, 41)), key=lambda t: t[1])


def _write(matrix: Matrix, cells: List[Tuple[int, int]], bits: int) -> None:
    for i, (r, c) in enumerate(cells):
        matrix[r][c] = bool((bits >> i) & 1)


def _read(matrix: Matrix, cells: List[Tuple[int, int]]) -> int:
    return sum(1 << i for i, (r, c) in enumerate(cells) if matrix[r][c])


def write_format_info(matrix: Matrix, ecc: str, mask: int) -> None:
    """Write both copies of the format information in place."""
    bits = format_bits(ecc, mask)
    for copy in format_info_cells(len(matrix)):
        _write(matrix, copy, bits)


def write_version_info(matrix: Matrix, version: int) -> None:
    """Write both copies of the version information in place (no-op below v7)."""
    if version < 7:
        return
    bits = version_bits(version)
    for copy in version_info_cells(len(matrix)):
        _write(matrix, copy, bits)


def read_format_info(matrix: Matrix) -> Tuple[str, int, int]:
    """
    Read both format copies from a finished matrix and decode the closer one.

    Returns:
        Tuple[str, int, int]: (ecc, mask, distance)
    """
    results = [decode_format_bits(_read(matrix, copy)) for copy in format_info_cells(len(matrix))]
    return min(results, key=lambda res: res[2])
