# -*- coding: utf-8 -*-
"""
Configuration Value Objects

EncodeOptions enumerates every option of an encode request together with its
default. PublishSettings holds the upload limits and the deployment settings
read from the environment.
"""

import os
import re
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Tuple

from .errors import ValidationError

ECC_LEVELS = ('L', 'M', 'Q', 'H')
OUTPUT_KINDS = ('png', 'jpeg', 'svg')

DEFAULT_SIZE_PX = 300
DEFAULT_DARK = '#000000'
DEFAULT_LIGHT = '#ffffff'
DEFAULT_ECC = 'M'
DEFAULT_QUIET_ZONE = 2

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ALLOWED_CONTENT_TYPES = (
    'image/jpeg',
    'image/png',
    'image/gif',
    'image/webp',
    'image/svg+xml',
    'image/bmp',
)

_COLOR_RE = re.compile(r'^#[0-9a-fA-F]{6}$')


def _to_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer") from None


@dataclass(frozen=True)
class EncodeOptions:
    """
    Options for turning text into a rendered symbol.

    Attributes:
        size_px: Side length of the whole image in pixels (quiet zone included)
        dark_color: Color of dark modules, '#RRGGBB'
        light_color: Color of light modules and quiet zone, '#RRGGBB'
        ecc_level: Error correction level ('L', 'M', 'Q', 'H')
        quiet_zone: Quiet zone width in modules
        kind: Output encoding ('png', 'jpeg', 'svg')
        module_size: Pixels per module; overrides size_px when set
        version: Force a version (1-40) instead of the smallest that fits
        mask: Force a mask pattern (0-7) instead of the penalty search
    """
    size_px: int = DEFAULT_SIZE_PX
    dark_color: str = DEFAULT_DARK
    light_color: str = DEFAULT_LIGHT
    ecc_level: str = DEFAULT_ECC
    quiet_zone: int = DEFAULT_QUIET_ZONE
    kind: str = 'png'
    module_size: Optional[int] = None
    version: Optional[int] = None
    mask: Optional[int] = None

    def __post_init__(self):
        if self.size_px < 1 or self.size_px > 4096:
            raise ValidationError("sizePx must be between 1 and 4096")
        for name, color in (('darkColor', self.dark_color), ('lightColor', self.light_color)):
            if not isinstance(color, str) or not _COLOR_RE.match(color):
                raise ValidationError(f"{name} must be a color in the form #RRGGBB")
        if self.ecc_level not in ECC_LEVELS:
            raise ValidationError(f"eccLevel must be one of {', '.join(ECC_LEVELS)}")
        if self.quiet_zone < 0 or self.quiet_zone > 20:
            raise ValidationError("quietZone must be between 0 and 20")
        if self.kind not in OUTPUT_KINDS:
            raise ValidationError(f"format must be one of {', '.join(OUTPUT_KINDS)}")
        if self.module_size is not None and not 1 <= self.module_size <= 100:
            raise ValidationError("moduleSize must be between 1 and 100")
        if self.version is not None and not 1 <= self.version <= 40:
            raise ValidationError("version must be between 1 and 40")
        if self.mask is not None and not 0 <= self.mask <= 7:
            raise ValidationError("mask must be between 0 and 7")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> 'EncodeOptions':
        """Build options from request values, applying the defaults for missing keys."""
        size = values.get('sizePx', values.get('size'))
        version = values.get('version')
        mask = values.get('mask')
        module_size = values.get('moduleSize')
        return cls(
            size_px=DEFAULT_SIZE_PX if size in (None, '') else _to_int(size, 'sizePx'),
            dark_color=values.get('darkColor') or DEFAULT_DARK,
            light_color=values.get('lightColor') or DEFAULT_LIGHT,
            ecc_level=str(values.get('eccLevel') or DEFAULT_ECC).strip().upper(),
            quiet_zone=_to_int(values.get('quietZone', DEFAULT_QUIET_ZONE), 'quietZone'),
            kind=str(values.get('format') or 'png').strip().lower(),
            module_size=None if module_size in (None, '') else _to_int(module_size, 'moduleSize'),
            version=None if version in (None, '', 'auto') else _to_int(version, 'version'),
            mask=None if mask in (None, '', 'auto') else _to_int(mask, 'mask'),
        )

    def with_changes(self, **changes) -> 'EncodeOptions':
        return replace(self, **changes)


@dataclass(frozen=True)
class PublishSettings:
    """Limits and deployment settings for the publish workflow."""
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    allowed_content_types: Tuple[str, ...] = ALLOWED_CONTENT_TYPES
    public_base_url: Optional[str] = None
    storage_dir: Optional[str] = None
    encode_options: EncodeOptions = field(default_factory=EncodeOptions)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> 'PublishSettings':
        """
        Read settings from environment variables.

        QRPUBLISH_PUBLIC_BASE_URL: public address prefix of the blob store
        QRPUBLISH_STORAGE_DIR: directory for the file system blob store
        QRPUBLISH_MAX_UPLOAD_BYTES: upload size ceiling
        """
        env = os.environ if environ is None else environ
        max_bytes = env.get('QRPUBLISH_MAX_UPLOAD_BYTES')
        return cls(
            max_upload_bytes=MAX_UPLOAD_BYTES if not max_bytes else _to_int(max_bytes, 'QRPUBLISH_MAX_UPLOAD_BYTES'),
            public_base_url=(env.get('QRPUBLISH_PUBLIC_BASE_URL') or '').strip() or None,
            storage_dir=(env.get('QRPUBLISH_STORAGE_DIR') or '').strip() or None,
        )
