# -*- coding: utf-8 -*-
import pytest

from qrpublish.segments import describe


def reference_matrix(symbol):
    """Matrix segno produces for the same segments, version, level and mask."""
    segno = pytest.importorskip("segno")
    segments = [(text, segno.consts.MODE_MAPPING[mode]) for text, mode in describe(symbol.segments)]
    qr = segno.make(segments, error=symbol.ecc_level, version=symbol.version,
                    mask=symbol.mask_id, encoding='utf-8', eci=False, micro=False,
                    boost_error=False)
    return [[bool(v) for v in row] for row in qr.matrix]


def decode_image(data: bytes) -> str:
    """Decode a rendered raster image with OpenCV's QR detector."""
    cv2 = pytest.importorskip("cv2")
    np = pytest.importorskip("numpy")
    img = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_GRAYSCALE)
    text, _, _ = cv2.QRCodeDetector().detectAndDecode(img)
    return text
