# -*- coding: utf-8 -*-
import pytest

from qrpublish import qr_generator
from qrpublish.capacity import build_data_codewords
from qrpublish.config import EncodeOptions
from qrpublish.errors import CapacityExceededError, EncodingFailure, ValidationError
from qrpublish.format_info import read_format_info, write_version_info
from qrpublish.functional_areas import build_base_matrix, place_codewords
from qrpublish.qr_generator import (
    MASK_PATTERNS,
    apply_mask,
    encode_text,
    evaluate_all_masks,
    make_qr,
)
from qrpublish.reed_solomon import add_ecc_and_interleave

from .helpers import decode_image, reference_matrix


def unmasked(symbol):
    data = build_data_codewords(list(symbol.segments), symbol.version, symbol.ecc_level)
    codewords = add_ecc_and_interleave(data, symbol.version, symbol.ecc_level)
    modules, func_mask = build_base_matrix(symbol.version)
    write_version_info(modules, symbol.version)
    place_codewords(modules, func_mask, codewords, symbol.version)
    return modules, func_mask


def test_symbol_shape():
    symbol = make_qr("HELLO WORLD", ecc='M')
    assert symbol.version == 1
    assert symbol.module_count == 21
    assert len(symbol.matrix) == 21 and all(len(row) == 21 for row in symbol.matrix)
    assert symbol.text == "HELLO WORLD"
    assert 0 <= symbol.mask_id <= 7


def test_encoding_is_deterministic():
    a = make_qr("https://example.com/images/1712345678901-k3j9xq.png", ecc='Q')
    b = make_qr("https://example.com/images/1712345678901-k3j9xq.png", ecc='Q')
    assert a == b
    assert a.mask_id == b.mask_id


def test_selected_mask_has_lowest_penalty():
    symbol = make_qr("https://example.com", ecc='M')
    modules, func_mask = unmasked(symbol)
    best, best_score, scores = evaluate_all_masks(modules, func_mask, 'M')
    assert sorted(scores) == list(range(8))
    assert best == symbol.mask_id
    assert all(best_score <= score for score in scores.values())
    assert best == min(m for m, s in scores.items() if s == best_score)


def test_tied_masks_resolve_to_lowest_id(monkeypatch):
    def tie_between_3_and_6(matrix):
        _, mask, _ = read_format_info(matrix)
        return 5 if mask in (3, 6) else 10

    monkeypatch.setattr(qr_generator, "compute_mask_penalty", tie_between_3_and_6)
    assert make_qr("TIE").mask_id == 3

    monkeypatch.setattr(qr_generator, "compute_mask_penalty", lambda matrix: 42)
    assert make_qr("TIE").mask_id == 0


def test_mask_leaves_function_patterns_alone():
    symbol = make_qr("HELLO WORLD")
    modules, func_mask = unmasked(symbol)
    for mask in range(len(MASK_PATTERNS)):
        masked = apply_mask(modules, func_mask, mask)
        for r in range(21):
            for c in range(21):
                if func_mask[r][c]:
                    assert masked[r][c] == modules[r][c]
                else:
                    assert masked[r][c] == (modules[r][c] != MASK_PATTERNS[mask](r, c))


def test_forced_mask_and_version():
    symbol = make_qr("HELLO WORLD", ecc='H', version=3, mask=6)
    assert (symbol.version, symbol.mask_id) == (3, 6)
    with pytest.raises(CapacityExceededError):
        make_qr("a" * 30, ecc='H', version=1)


@pytest.mark.parametrize("kwargs", [
    {'text': ""},
    {'text': "x", 'ecc': 'Z'},
    {'text': "x", 'mask': 8},
    {'text': "x", 'version': 41},
])
def test_invalid_parameters(kwargs):
    with pytest.raises(ValidationError):
        make_qr(**kwargs)


def sample_text(version):
    return "QR 2026" if version == 1 else "https://example.com"


@pytest.mark.parametrize("ecc", ['L', 'M', 'Q', 'H'])
@pytest.mark.parametrize("version", [1, 5, 10, 25, 40])
def test_matches_reference_encoder(version, ecc):
    symbol = make_qr(sample_text(version), ecc=ecc, version=version)
    assert symbol.version == version
    assert symbol.rows() == reference_matrix(symbol)


@pytest.mark.parametrize("text", [
    "HELLO WORLD",
    "01234567890123456789",
    "Order 0012345678 for ACME-42 / due 2026",
    "héllo wörld, ünïcode ✓",
    "a" * 300,
])
def test_mixed_segments_match_reference_encoder(text):
    symbol = make_qr(text, ecc='M')
    assert symbol.rows() == reference_matrix(symbol)


@pytest.mark.parametrize("ecc", ['L', 'M', 'Q', 'H'])
@pytest.mark.parametrize("version", [1, 5, 10])
def test_rendered_symbol_decodes(version, ecc):
    text = sample_text(version)
    options = EncodeOptions(ecc_level=ecc, version=version, module_size=8, quiet_zone=4)
    image = encode_text(text, options)
    assert decode_image(image.data) == text


def test_encode_request_with_defaults():
    image = encode_text("https://example.com")
    assert image.mimetype == 'image/png'
    assert (image.width, image.height) == (300, 300)
    assert decode_image(image.data) == "https://example.com"


def test_encode_text_rejects_blank_text():
    with pytest.raises(ValidationError):
        encode_text("   ")


def test_surrounding_whitespace_is_encoded():
    text = "  padded text  "
    assert make_qr(text).text == text
    image = encode_text(text, EncodeOptions(module_size=8, quiet_zone=4))
    assert decode_image(image.data) == text


def test_unexpected_pipeline_error_becomes_encoding_failure(monkeypatch):
    def broken_ecc(data, version, ecc):
        raise IndexError("block table out of range")

    monkeypatch.setattr(qr_generator, "add_ecc_and_interleave", broken_ecc)
    with pytest.raises(EncodingFailure) as excinfo:
        encode_text("https://example.com")
    assert isinstance(excinfo.value.__cause__, IndexError)


def test_caller_errors_pass_through_encode_text():
    with pytest.raises(CapacityExceededError):
        encode_text("a" * 3000, EncodeOptions(ecc_level='H'))
