# -*- coding: utf-8 -*-
"""
QR Code Functional Areas Module

This module lays out the functional areas of a QR symbol according to
ISO/IEC 18004:2015: finder patterns with their separators, timing patterns,
alignment patterns, the dark module, and the cells reserved for format and
version information. It also streams codeword bits into the remaining cells.

Functions:
    compute_alignment_centers: Calculate alignment pattern center positions
    build_function_mask: Mark every reserved module
    build_base_matrix: Draw the function patterns of a version
    data_module_coords: Data cells in placement order
    place_codewords: Write codeword bits into the data cells
"""

from typing import List, Sequence, Tuple

from .capacity import remainder_bits, total_codewords
from .errors import LayoutDefect

Matrix = List[List[bool]]


def symbol_size(version: int) -> int:
    """Modules per side: 4 * version + 17."""
    if not 1 <= version <= 40:
        raise ValueError(f"Version must be between 1 and 40, got {version}")
    return 4 * version + 17


def compute_alignment_centers(version: int) -> List[int]:
    """
    Calculate the center positions of alignment patterns for a given QR version.

    Alignment patterns are 5x5 modules used to correct for perspective distortion
    in QR codes. Version 1 has none. The first center is always 6 and the last
    is size - 7; the ones in between are evenly spaced by an even step,
    measured from the last one.

    Args:
        version (int): QR code version (1-40)

    Returns:
        List[int]: Center coordinates, used for both rows and columns

    Example:
        >>> compute_alignment_centers(7)
        [6, 22, 38]
        >>> compute_alignment_centers(32)
        [6, 34, 60, 86, 112, 138]
    """
    if version == 1:
        return []

    size = symbol_size(version)
    num = version // 7 + 2
    step = (version * 8 + num * 3 + 5) // (num * 4 - 4) * 2

    centers = [size - 7 - i * step for i in range(num - 1)]
    return [6] + centers[::-1]


def _alignment_positions(version: int) -> List[Tuple[int, int]]:
    centers = compute_alignment_centers(version)
    if not centers:
        return []
    first, last = centers[0], centers[-1]
    corners = {(first, first), (first, last), (last, first)}
    return [(cy, cx) for cy in centers for cx in centers if (cy, cx) not in corners]


def format_info_cells(size: int) -> Tuple[List[Tuple[int, int]], List[Tuple[int, int]]]:
    """
    (row, col) of both format information copies, ordered from bit 0 to 14.

    The first copy wraps around the top-left finder; the second is split
    between the top-right (bits 0-7) and bottom-left (bits 8-14) finders.
    """
    first = [(i, 8) for i in range(6)] + [(7, 8), (8, 8), (8, 7)]
    first += [(8, 14 - i) for i in range(9, 15)]
    second = [(8, size - 1 - i) for i in range(8)]
    second += [(size - 15 + i, 8) for i in range(8, 15)]
    return first, second


def version_info_cells(size: int) -> Tuple[List[Tuple[int, int]], List[Tuple[int, int]]]:
    """(row, col) of both 18-bit version information copies, bit 0 first."""
    top_right = [(i // 3, size - 11 + i % 3) for i in range(18)]
    bottom_left = [(size - 11 + i % 3, i // 3) for i in range(18)]
    return top_right, bottom_left


def build_function_mask(size: int, version: int) -> Tuple[Matrix, Matrix]:
    """
    Build masks identifying functional and separator areas in QR codes.

    Args:
        size (int): QR code size in modules (21 for v1, 25 for v2, etc.)
        version (int): QR code version (1-40)

    Returns:
        Tuple[Matrix, Matrix]: (func_mask, sep_mask)
            - func_mask[r][c] = True if module (r,c) is reserved (finder,
              separator, timing, alignment, dark module, format, version)
            - sep_mask[r][c] = True if module (r,c) is a finder separator
    """
    func_mask = [[False] * size for _ in range(size)]
    sep_mask = [[False] * size for _ in range(size)]

    # 1. FINDER PATTERNS (7x7) plus their 1-module separators
    for (r0, c0) in ((0, 0), (0, size - 7), (size - 7, 0)):
        for r in range(r0 - 1, r0 + 8):
            for c in range(c0 - 1, c0 + 8):
                if 0 <= r < size and 0 <= c < size:
                    func_mask[r][c] = True
                    if r < r0 or r > r0 + 6 or c < c0 or c > c0 + 6:
                        sep_mask[r][c] = True

    # 2. TIMING PATTERNS (row 6 and column 6)
    for i in range(size):
        func_mask[6][i] = True
        func_mask[i][6] = True

    # 3. ALIGNMENT PATTERNS (5x5, v2+)
    for (cy, cx) in _alignment_positions(version):
        for r in range(cy - 2, cy + 3):
            for c in range(cx - 2, cx + 3):
                func_mask[r][c] = True

    # 4. FORMAT INFORMATION and the dark module next to it
    for copy in format_info_cells(size):
        for (r, c) in copy:
            func_mask[r][c] = True
    func_mask[size - 8][8] = True

    # 5. VERSION INFORMATION (v7+)
    if version >= 7:
        for copy in version_info_cells(size):
            for (r, c) in copy:
                func_mask[r][c] = True

    return func_mask, sep_mask


def build_base_matrix(version: int) -> Tuple[Matrix, Matrix]:
    """
    Draw the function patterns of `version` on an all-light grid.

    Format and version cells are reserved but left light; they are written
    once the mask is known.

    Returns:
        Tuple[Matrix, Matrix]: (modules, func_mask)
    """
    size = symbol_size(version)
    func_mask, _ = build_function_mask(size, version)
    modules = [[False] * size for _ in range(size)]

    for (r0, c0) in ((0, 0), (0, size - 7), (size - 7, 0)):
        for dr in range(7):
            for dc in range(7):
                ring = max(abs(dr - 3), abs(dc - 3))
                modules[r0 + dr][c0 + dc] = ring != 2

    for i in range(8, size - 8):
        modules[6][i] = i % 2 == 0
        modules[i][6] = i % 2 == 0

    for (cy, cx) in _alignment_positions(version):
        for dr in range(-2, 3):
            for dc in range(-2, 3):
                modules[cy + dr][cx + dc] = max(abs(dr), abs(dc)) != 1

    modules[size - 8][8] = True
    return modules, func_mask


def data_module_coords(size: int, func_mask: Matrix) -> List[Tuple[int, int]]:
    """
    Get coordinates of non-functional modules in standard QR placement order.

    QR codes place data in two-column strips from right to left, alternating
    upward and downward, skipping column 6 (timing pattern).

    Args:
        size (int): QR code size in modules
        func_mask (Matrix): Functional area mask

    Returns:
        List[Tuple[int, int]]: List of (row, col) coordinates in placement order
    """
    coords = []
    upward = True
    col = size - 1

    while col > 0:
        if col == 6:
            col -= 1

        for i in range(size):
            r = (size - 1 - i) if upward else i
            for c in (col, col - 1):
                if not func_mask[r][c]:
                    coords.append((r, c))

        upward = not upward
        col -= 2

    return coords


def place_codewords(modules: Matrix, func_mask: Matrix, codewords: Sequence[int], version: int) -> None:
    """
    Write codeword bits (MSB first) into every data cell; remainder cells stay light.

    Raises:
        LayoutDefect: If the codeword stream does not match the free cells
    """
    size = len(modules)
    coords = data_module_coords(size, func_mask)
    needed = total_codewords(version)
    if len(codewords) != needed or len(coords) != needed * 8 + remainder_bits(version):
        raise LayoutDefect(
            f"Version {version}: {len(codewords)} codewords for {len(coords)} free cells "
            f"(expected {needed} codewords)")

    for i, (r, c) in enumerate(coords):
        if i < needed * 8:
            modules[r][c] = bool((codewords[i >> 3] >> (7 - (i & 7))) & 1)
        else:
            modules[r][c] = False
