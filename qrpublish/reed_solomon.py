# -*- coding: utf-8 -*-
"""
Reed-Solomon Error Correction Module

Arithmetic over GF(256) with the primitive polynomial x^8+x^4+x^3+x^2+1
(0x11D), generator polynomials, block splitting and interleaving as
prescribed by ISO/IEC 18004:2015 section 7.5.

Functions:
    gf_multiply: Multiply two field elements
    generator_polynomial: Coefficients of the degree-n generator
    rs_remainder: Error correction codewords for one block
    split_blocks: Split data codewords into the prescribed blocks
    add_ecc_and_interleave: Final codeword sequence for placement
"""

from functools import lru_cache
from typing import List, Sequence, Tuple

from .capacity import data_codewords, ecc_codewords, num_blocks, total_codewords

PRIMITIVE = 0x11D


def _build_tables() -> Tuple[List[int], List[int]]:
    exp = [0] * 512
    log = [0] * 256
    x = 1
    for i in range(255):
        exp[i] = x
        log[x] = i
        x <<= 1
        if x & 0x100:
            x ^= PRIMITIVE
    # Doubled so exp[log a + log b] never needs a modulo
    for i in range(255, 512):
        exp[i] = exp[i - 255]
    return exp, log


GF_EXP, GF_LOG = _build_tables()


def gf_multiply(a: int, b: int) -> int:
    """
    Multiply two elements of GF(256).

    Example:
        >>> gf_multiply(2, 128)
        29
    """
    if a == 0 or b == 0:
        return 0
    return GF_EXP[GF_LOG[a] + GF_LOG[b]]


def gf_pow(exponent: int) -> int:
    """alpha ** exponent."""
    return GF_EXP[exponent % 255]


@lru_cache(maxsize=None)
def generator_polynomial(degree: int) -> Tuple[int, ...]:
    """
    Coefficients of prod(x - alpha^i) for i in 0..degree-1, highest power
    first. The leading coefficient (always 1) is included.
    """
    if not 1 <= degree <= 255:
        raise ValueError(f"Degree out of range: {degree}")
    poly = [1]
    for i in range(degree):
        root = gf_pow(i)
        nxt = poly + [0]
        for j, coef in enumerate(poly):
            nxt[j + 1] ^= gf_multiply(coef, root)
        poly = nxt
    return tuple(poly)


def rs_remainder(data: Sequence[int], degree: int) -> List[int]:
    """
    Error correction codewords of one block.

    The remainder of data(x) * x^degree divided by the generator polynomial.
    """
    gen = generator_polynomial(degree)
    remainder = [0] * degree
    for byte in data:
        factor = byte ^ remainder[0]
        remainder = remainder[1:] + [0]
        if factor:
            for i in range(degree):
                remainder[i] ^= gf_multiply(gen[i + 1], factor)
    return remainder


def block_layout(version: int, ecc: str) -> List[int]:
    """Data codeword count of every block, short blocks first."""
    blocks = num_blocks(version, ecc)
    total_data = data_codewords(version, ecc)
    short_len = total_data // blocks
    num_long = total_data % blocks
    return [short_len] * (blocks - num_long) + [short_len + 1] * num_long


def split_blocks(data: Sequence[int], version: int, ecc: str) -> List[List[int]]:
    layout = block_layout(version, ecc)
    if len(data) != sum(layout):
        raise ValueError(f"Expected {sum(layout)} data codewords, got {len(data)}")
    blocks = []
    k = 0
    for length in layout:
        blocks.append(list(data[k:k + length]))
        k += length
    return blocks


def _interleave(blocks: Sequence[Sequence[int]]) -> List[int]:
    result = []
    longest = max(len(b) for b in blocks)
    for i in range(longest):
        for block in blocks:
            if i < len(block):
                result.append(block[i])
    return result


def add_ecc_and_interleave(data: Sequence[int], version: int, ecc: str) -> List[int]:
    """
    Compute per-block error correction and interleave.

    Data codewords are interleaved across blocks first, followed by all error
    correction codewords interleaved the same way.

    Args:
        data (Sequence[int]): Padded data codewords
        version (int): QR code version (1-40)
        ecc (str): Error correction level ('L', 'M', 'Q', 'H')

    Returns:
        List[int]: total_codewords(version) codewords in placement order
    """
    blocks = split_blocks(data, version, ecc)
    degree = ecc_codewords(version, ecc) // len(blocks)
    ecc_blocks = [rs_remainder(block, degree) for block in blocks]
    result = _interleave(blocks) + _interleave(ecc_blocks)
    assert len(result) == total_codewords(version)
    return result
