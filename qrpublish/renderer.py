# -*- coding: utf-8 -*-
"""
QR Code Renderer Module

Renders a finished module matrix as a raster image (PNG or JPEG, through
Pillow and numpy) or as SVG, with a quiet zone and a two-color palette.

Functions:
    render_png_from_matrix: Raster rendering
    render_svg_from_matrix: Vector rendering, one rect per dark module
    render_symbol: Render a Symbol with EncodeOptions
    to_data_url: Embed a rendered image in a data: URL
"""

import base64
from dataclasses import dataclass
from io import BytesIO
from typing import Callable, Optional, Sequence, Tuple
from urllib.parse import quote

import numpy as np
from PIL import Image, ImageColor

from .config import EncodeOptions
from .errors import EncodingFailure

MIME_TYPES = {
    'png': 'image/png',
    'jpeg': 'image/jpeg',
    'svg': 'image/svg+xml',
}

Rows = Sequence[Sequence[bool]]


@dataclass(frozen=True)
class RenderedImage:
    data: bytes
    mimetype: str
    width: int
    height: int

    def to_data_url(self) -> str:
        return to_data_url(self)


def _rgb(color: str) -> Tuple[int, int, int]:
    return ImageColor.getrgb(color)[:3]


def module_size_for(size_px: int, module_count: int, quiet_zone: int) -> int:
    """Largest whole pixel size per module that fits in `size_px`, at least 1."""
    return max(1, size_px // (module_count + 2 * quiet_zone))


def render_png_from_matrix(
    matrix: Rows,
    border: int = 2,
    scale: int = 10,
    dark: str = '#000000',
    light: str = '#ffffff',
    size_px: Optional[int] = None,
    kind: str = 'png'
) -> RenderedImage:
    """
    Render a QR code matrix as a raster image.

    Args:
        matrix (Rows): QR code matrix (True=dark, False=light)
        border (int): Quiet zone size in modules
        scale (int): Pixel size per module
        dark (str): Dark module color, '#RRGGBB'
        light (str): Light module color, '#RRGGBB'
        size_px (Optional[int]): Resample the result to exactly this side
            length (nearest neighbour); None keeps (n + 2*border) * scale
        kind (str): 'png' or 'jpeg'

    Returns:
        RenderedImage: Encoded image bytes
    """
    modules = np.asarray([[bool(v) for v in row] for row in matrix], dtype=bool)
    modules = np.pad(modules, border, mode='constant', constant_values=False)
    modules = np.kron(modules, np.ones((scale, scale), dtype=bool))

    pixels = np.empty(modules.shape + (3,), dtype=np.uint8)
    pixels[modules] = _rgb(dark)
    pixels[~modules] = _rgb(light)

    img = Image.fromarray(pixels)
    if size_px is not None and img.size != (size_px, size_px):
        img = img.resize((size_px, size_px), Image.NEAREST)

    buf = BytesIO()
    if kind == 'jpeg':
        img.save(buf, format='JPEG', quality=95, optimize=True)
    else:
        img.save(buf, format='PNG', optimize=True)
    return RenderedImage(buf.getvalue(), MIME_TYPES[kind], img.size[0], img.size[1])


def render_svg_from_matrix(
    matrix: Rows,
    border: int = 2,
    scale: int = 10,
    dark: str = '#000000',
    light: str = '#ffffff',
    size_px: Optional[int] = None
) -> RenderedImage:
    """
    Render a QR code matrix as SVG.

    The viewBox is measured in modules; width and height carry the pixel
    size, so the drawing scales without resampling.
    """
    rows = list(matrix)
    size_mod = len(rows) + 2 * border
    px = size_px if size_px is not None else size_mod * scale

    out = []
    out.append('<?xml version="1.0" encoding="UTF-8"?>')
    out.append(f'<svg xmlns="http://www.w3.org/2000/svg" width="{px}" height="{px}" '
               f'viewBox="0 0 {size_mod} {size_mod}" shape-rendering="crispEdges">')
    out.append(f'<rect width="{size_mod}" height="{size_mod}" fill="{light}"/>')
    for r, row in enumerate(rows):
        for c, value in enumerate(row):
            if value:
                out.append(f'<rect x="{c + border}" y="{r + border}" width="1" height="1" fill="{dark}"/>')
    out.append('</svg>')
    return RenderedImage("\n".join(out).encode("utf-8"), MIME_TYPES['svg'], px, px)


def render_symbol(symbol, options: EncodeOptions = None) -> RenderedImage:
    """
    Render a Symbol with the size, quiet zone, palette and kind in `options`.

    With options.module_size set the image is exactly
    (module_count + 2 * quiet_zone) * module_size pixels wide; otherwise it
    is options.size_px wide. A size_px below one pixel per module falls back
    to one pixel per module, so no module is ever dropped.
    """
    options = options or EncodeOptions()
    count = symbol.module_count
    if options.module_size is not None:
        scale, size_px = options.module_size, None
    elif options.size_px < count + 2 * options.quiet_zone:
        scale, size_px = 1, None
    else:
        scale, size_px = module_size_for(options.size_px, count, options.quiet_zone), options.size_px

    if options.kind == 'svg':
        return render_svg_from_matrix(symbol.matrix, border=options.quiet_zone, scale=scale,
                                      dark=options.dark_color, light=options.light_color,
                                      size_px=size_px)
    if options.kind in ('png', 'jpeg'):
        return render_png_from_matrix(symbol.matrix, border=options.quiet_zone, scale=scale,
                                      dark=options.dark_color, light=options.light_color,
                                      size_px=size_px, kind=options.kind)
    raise EncodingFailure(f"Unsupported output kind {options.kind!r}")


def _utf8_data_url(image: RenderedImage) -> Optional[str]:
    if image.mimetype != MIME_TYPES['svg']:
        return None
    try:
        text = image.data.decode('utf-8')
    except UnicodeDecodeError:
        return None
    return f"data:{image.mimetype};charset=utf-8,{quote(text, safe='')}"


def _base64_data_url(image: RenderedImage) -> Optional[str]:
    return f"data:{image.mimetype};base64,{base64.b64encode(image.data).decode('ascii')}"


# Tried in order; the first encoder returning a URL wins
DATA_URL_ENCODERS: Tuple[Callable[[RenderedImage], Optional[str]], ...] = (
    _utf8_data_url,
    _base64_data_url,
)


def to_data_url(image: RenderedImage, encoders=DATA_URL_ENCODERS) -> str:
    for encoder in encoders:
        url = encoder(image)
        if url is not None:
            return url
    raise EncodingFailure(f"No data URL encoding available for {image.mimetype}")
