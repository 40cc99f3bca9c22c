# -*- coding: utf-8 -*-
"""
QR Code Generator Module

This module runs the whole encoding pipeline: segmentation, version
selection, error correction, module placement, mask selection and format
information. The result is an immutable Symbol ready for rendering.

Functions:
    make_qr: Encode text into a Symbol
    evaluate_all_masks: Score all 8 mask patterns to find the optimal one
    encode_text: Encode and render in one call
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .capacity import build_data_codewords, select_version
from .config import ECC_LEVELS, EncodeOptions
from .errors import EncodingFailure, QRPublishError, ValidationError
from .format_info import write_format_info, write_version_info
from .functional_areas import Matrix, build_base_matrix, place_codewords
from .penalties import compute_mask_penalty
from .reed_solomon import add_ecc_and_interleave
from .renderer import RenderedImage, render_symbol
from .segments import Segment, describe

logger = logging.getLogger(__name__)

# Data module (r, c) is inverted when the pattern returns True
MASK_PATTERNS: Tuple[Callable[[int, int], bool], ...] = (
    lambda r, c: (r + c) % 2 == 0,
    lambda r, c: r % 2 == 0,
    lambda r, c: c % 3 == 0,
    lambda r, c: (r + c) % 3 == 0,
    lambda r, c: (r // 2 + c // 3) % 2 == 0,
    lambda r, c: (r * c) % 2 + (r * c) % 3 == 0,
    lambda r, c: ((r * c) % 2 + (r * c) % 3) % 2 == 0,
    lambda r, c: ((r + c) % 2 + (r * c) % 3) % 2 == 0,
)


@dataclass(frozen=True)
class Symbol:
    """
    An encoded QR symbol.

    Attributes:
        version: Size class (1-40)
        ecc_level: Error correction level ('L', 'M', 'Q', 'H')
        mask_id: Applied mask pattern (0-7)
        matrix: module_count x module_count tuple of rows (True=dark)
        segments: Segments the text was encoded with
    """
    version: int
    ecc_level: str
    mask_id: int
    matrix: Tuple[Tuple[bool, ...], ...]
    segments: Tuple[Segment, ...]

    @property
    def module_count(self) -> int:
        return 4 * self.version + 17

    @property
    def text(self) -> str:
        return ''.join(seg.text for seg in self.segments)

    def rows(self) -> List[List[bool]]:
        return [list(row) for row in self.matrix]


def apply_mask(modules: Matrix, func_mask: Matrix, mask: int) -> Matrix:
    """Return a copy of `modules` with mask pattern `mask` applied to data cells."""
    pattern = MASK_PATTERNS[mask]
    size = len(modules)
    return [
        [modules[r][c] ^ (not func_mask[r][c] and pattern(r, c)) for c in range(size)]
        for r in range(size)
    ]


def _masked_candidate(modules: Matrix, func_mask: Matrix, ecc: str, mask: int) -> Matrix:
    candidate = apply_mask(modules, func_mask, mask)
    write_format_info(candidate, ecc, mask)
    return candidate


def evaluate_all_masks(
    modules: Matrix,
    func_mask: Matrix,
    ecc: str
) -> Tuple[int, int, Dict[int, int]]:
    """
    Evaluate all mask patterns (0-7) to find the optimal one.

    Each candidate gets its own format information before scoring, so the
    penalty covers the complete symbol. On equal scores the lower mask wins.

    Args:
        modules (Matrix): Unmasked matrix with function patterns and data
        func_mask (Matrix): Reserved module mask
        ecc (str): Error correction level ('L', 'M', 'Q', 'H')

    Returns:
        Tuple[int, int, Dict[int, int]]: (best_mask, best_score, all_scores)

    Example:
        >>> modules, func_mask = build_base_matrix(1)
        >>> best_mask, best_score, scores = evaluate_all_masks(modules, func_mask, 'M')
        >>> sorted(scores) == list(range(8))
        True
    """
    scores = {}
    best_mask = None
    best_score = None

    for mask_pattern in range(len(MASK_PATTERNS)):
        penalty_score = compute_mask_penalty(_masked_candidate(modules, func_mask, ecc, mask_pattern))
        scores[mask_pattern] = penalty_score
        if best_score is None or penalty_score < best_score:
            best_score = penalty_score
            best_mask = mask_pattern

    return best_mask, best_score, scores


def make_qr(
    text: str,
    ecc: str = 'M',
    version: Optional[int] = None,
    mask: Optional[int] = None
) -> Symbol:
    """
    Encode text into a QR symbol.

    Args:
        text (str): The data to encode
        ecc (str): Error correction level ('L', 'M', 'Q', 'H')
            - L: ~7% recovery capability
            - M: ~15% recovery capability
            - Q: ~25% recovery capability
            - H: ~30% recovery capability
        version (Optional[int]): Force a version (1-40); None selects the
            smallest one that fits
        mask (Optional[int]): Force a mask pattern (0-7); None runs the
            penalty search

    Returns:
        Symbol: The finished symbol

    Raises:
        ValidationError: If text is empty or a parameter is out of range
        CapacityExceededError: If the text does not fit
        UnsupportedCharacterError: If the text cannot be encoded as UTF-8

    Example:
        >>> qr = make_qr("https://example.com")
        >>> qr.version, qr.module_count
        (2, 25)
    """
    ecc = (ecc or 'M').upper()
    if ecc not in ECC_LEVELS:
        raise ValidationError(f"Error correction level must be one of {', '.join(ECC_LEVELS)}")
    if mask is not None and not 0 <= mask <= 7:
        raise ValidationError("Mask must be between 0 and 7")
    if version is not None and not 1 <= version <= 40:
        raise ValidationError("Version must be between 1 and 40")

    version, segments = select_version(text, ecc, version)
    data = build_data_codewords(segments, version, ecc)
    codewords = add_ecc_and_interleave(data, version, ecc)

    modules, func_mask = build_base_matrix(version)
    write_version_info(modules, version)
    place_codewords(modules, func_mask, codewords, version)

    if mask is None:
        mask, score, _ = evaluate_all_masks(modules, func_mask, ecc)
        logger.debug(f"Selected mask {mask} (score: {score})")

    final = _masked_candidate(modules, func_mask, ecc, mask)
    logger.debug(f"Encoded {len(text)} chars as version {version}-{ecc} with segments {describe(segments)}")
    return Symbol(
        version=version,
        ecc_level=ecc,
        mask_id=mask,
        matrix=tuple(tuple(row) for row in final),
        segments=tuple(segments),
    )


def encode_text(text: str, options: EncodeOptions = None) -> RenderedImage:
    """
    Encode text and render it with `options`.

    The text is encoded exactly as given; surrounding whitespace is kept.

    Returns:
        RenderedImage: The rendered symbol

    Raises:
        ValidationError, CapacityExceededError: Caller errors, passed through
        EncodingFailure: Any other failure inside the pipeline
    """
    options = options or EncodeOptions()
    text = text or ''
    if not text.strip():
        raise ValidationError("Text to encode must not be empty")

    try:
        symbol = make_qr(text, ecc=options.ecc_level, version=options.version, mask=options.mask)
        image = render_symbol(symbol, options)
    except (QRPublishError, AssertionError):
        raise
    except Exception as ex:
        raise EncodingFailure(f"QR generation failed: {ex}") from ex
    logger.info(f"Generated QR code version {symbol.version}-{symbol.ecc_level} mask {symbol.mask_id} "
                f"for {len(text)} chars")
    return image
