# -*- coding: utf-8 -*-
import pytest

from qrpublish.capacity import raw_data_modules, total_codewords
from qrpublish.errors import LayoutDefect
from qrpublish.functional_areas import (
    build_base_matrix,
    build_function_mask,
    compute_alignment_centers,
    data_module_coords,
    format_info_cells,
    place_codewords,
    symbol_size,
    version_info_cells,
)


def test_symbol_size():
    assert symbol_size(1) == 21
    assert symbol_size(40) == 177
    with pytest.raises(ValueError):
        symbol_size(41)


@pytest.mark.parametrize("version, centers", [
    (1, []),
    (2, [6, 18]),
    (7, [6, 22, 38]),
    (15, [6, 26, 48, 70]),
    (32, [6, 34, 60, 86, 112, 138]),
    (36, [6, 24, 50, 76, 102, 128, 154]),
    (40, [6, 30, 58, 86, 114, 142, 170]),
])
def test_alignment_centers(version, centers):
    assert compute_alignment_centers(version) == centers


@pytest.mark.parametrize("version", range(1, 41))
def test_every_free_cell_is_visited_once(version):
    size = symbol_size(version)
    func_mask, _ = build_function_mask(size, version)
    coords = data_module_coords(size, func_mask)
    assert len(coords) == len(set(coords)) == raw_data_modules(version)
    assert not any(func_mask[r][c] for (r, c) in coords)
    free = {(r, c) for r in range(size) for c in range(size) if not func_mask[r][c]}
    assert free == set(coords)


@pytest.mark.parametrize("version", [1, 6, 7, 21, 40])
def test_placement_never_touches_reserved_cells(version):
    modules, func_mask = build_base_matrix(version)
    before = [row[:] for row in modules]
    codewords = [0xFF] * total_codewords(version)
    place_codewords(modules, func_mask, codewords, version)
    size = len(modules)
    for r in range(size):
        for c in range(size):
            if func_mask[r][c]:
                assert modules[r][c] == before[r][c]
    dark_data = sum(1 for r in range(size) for c in range(size) if modules[r][c] and not func_mask[r][c])
    assert dark_data == total_codewords(version) * 8


def test_function_patterns_version_1():
    modules, func_mask = build_base_matrix(1)
    assert modules[0][:7] == [True] * 7
    assert modules[1][:7] == [True, False, False, False, False, False, True]
    assert modules[3][:7] == [True, False, True, True, True, False, True]
    # separators
    assert modules[7][:8] == [False] * 8
    assert [modules[r][7] for r in range(8)] == [False] * 8
    # timing row and column
    assert [modules[6][c] for c in range(8, 13)] == [True, False, True, False, True]
    assert [modules[r][6] for r in range(8, 13)] == [True, False, True, False, True]
    # dark module
    assert modules[13][8] is True


def test_alignment_pattern_version_2():
    modules, func_mask = build_base_matrix(2)
    block = [modules[r][16:21] for r in range(16, 21)]
    assert block[0] == [True] * 5
    assert block[1] == [True, False, False, False, True]
    assert block[2] == [True, False, True, False, True]
    assert all(func_mask[r][c] for r in range(16, 21) for c in range(16, 21))


def test_reserved_info_cells():
    size = symbol_size(7)
    func_mask, _ = build_function_mask(size, 7)
    for copy in format_info_cells(size) + version_info_cells(size):
        assert len(copy) in (15, 18)
        assert all(func_mask[r][c] for (r, c) in copy)
    func_mask_6, _ = build_function_mask(symbol_size(6), 6)
    assert not func_mask_6[0][symbol_size(6) - 11]


def test_short_codeword_stream_is_a_layout_defect():
    modules, func_mask = build_base_matrix(3)
    with pytest.raises(LayoutDefect):
        place_codewords(modules, func_mask, [0] * (total_codewords(3) - 1), 3)
    with pytest.raises(AssertionError):
        place_codewords(modules, func_mask, [0] * (total_codewords(3) + 1), 3)
