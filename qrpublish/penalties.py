# -*- coding: utf-8 -*-
"""
QR Code Mask Penalty Evaluation Module

Scores a candidate symbol with the four penalty rules (N1-N4) of
ISO/IEC 18004:2015 section 7.8.3. The mask with the lowest total penalty
is selected.

Functions:
    penalty_N1: Runs of same-colored modules (Rule N1)
    penalty_N2: 2x2 blocks of the same color (Rule N2)
    penalty_N3: Finder-like 1:1:3:1:1 patterns (Rule N3)
    penalty_N4: Dark/light balance (Rule N4)
    compute_mask_penalty: Total penalty score
"""

from typing import Iterable, List, Sequence

N1_BASE = 3
N2_WEIGHT = 3
N3_WEIGHT = 40
N4_WEIGHT = 10

_FINDER_LIKE = (1, 0, 1, 1, 1, 0, 1)
_LIGHT_RUN = (0, 0, 0, 0)


def _lines(rows: Sequence[Sequence[bool]]) -> Iterable[Sequence[bool]]:
    """All rows followed by all columns."""
    yield from rows
    yield from zip(*rows)


def penalty_N1(rows: Sequence[Sequence[bool]]) -> int:
    """
    Runs of five or more same-colored modules in a row or column score
    3 + (run_length - 5).

    Example:
        >>> penalty_N1([[True] * 6 + [False]])
        4
    """
    score = 0
    for line in _lines(rows):
        run = 0
        prev = None
        for value in line:
            if value == prev:
                run += 1
            else:
                if run >= 5:
                    score += N1_BASE + run - 5
                prev, run = value, 1
        if run >= 5:
            score += N1_BASE + run - 5
    return score


def penalty_N2(rows: Sequence[Sequence[bool]]) -> int:
    """Every 2x2 block of one color scores 3; overlapping blocks all count."""
    score = 0
    for upper, lower in zip(rows, rows[1:]):
        for c in range(len(upper) - 1):
            value = upper[c]
            if upper[c + 1] == value and lower[c] == value and lower[c + 1] == value:
                score += N2_WEIGHT
    return score


def _count_finder_like(line: Sequence[bool]) -> int:
    # Modules beyond the edge belong to the quiet zone, which is light
    seq = (0,) * 4 + tuple(1 if v else 0 for v in line) + (0,) * 4
    found = 0
    for i in range(4, len(seq) - 10):
        if seq[i:i + 7] == _FINDER_LIKE:
            if seq[i - 4:i] == _LIGHT_RUN or seq[i + 7:i + 11] == _LIGHT_RUN:
                found += 1
    return found


def penalty_N3(rows: Sequence[Sequence[bool]]) -> int:
    """
    Each dark-light-dark-dark-dark-light-dark (1:1:3:1:1) sequence with four
    light modules on at least one side scores 40.
    """
    return N3_WEIGHT * sum(_count_finder_like(line) for line in _lines(rows))


def penalty_N4(rows: Sequence[Sequence[bool]]) -> int:
    """
    10 points for every full 5% step the dark share deviates from 50%.

    Example:
        >>> penalty_N4([[True, True, True, False]])
        50
    """
    total = sum(len(row) for row in rows)
    dark = sum(sum(1 for v in row if v) for row in rows)
    # k = floor(|dark% - 50| / 5), computed in integers
    k = abs(dark * 20 - total * 10) // total
    return k * N4_WEIGHT


def compute_mask_penalty(matrix: Sequence[Sequence[bool]]) -> int:
    """
    Calculate total mask penalty score for a QR code matrix.

    Args:
        matrix (Sequence[Sequence[bool]]): QR matrix (True=dark, False=light)

    Returns:
        int: Total penalty score (lower is better)
    """
    rows: List[List[bool]] = [[bool(v) for v in row] for row in matrix]
    return penalty_N1(rows) + penalty_N2(rows) + penalty_N3(rows) + penalty_N4(rows)
