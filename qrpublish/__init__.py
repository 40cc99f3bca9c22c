# -*- coding: utf-8 -*-
"""
QR Publish - Core Module

Encodes short text (typically the public URL of an uploaded file) as a QR
code and publishes uploads through a blob store.

Modules:
    segments: Mode segmentation and bit stream serialization
    capacity: Version selection and data codeword padding
    reed_solomon: GF(256) error correction and block interleaving
    functional_areas: Function patterns and codeword placement
    penalties: Mask pattern evaluation rules
    format_info: Format and version information
    qr_generator: Encoding pipeline and mask selection
    renderer: PNG / JPEG / SVG output
    storage: Blob stores and key generation
    resolver: Public URL resolution chain
    publisher: Upload-then-encode workflow
"""

__version__ = "1.0.0"

from .config import EncodeOptions, PublishSettings
from .errors import (
    BlobNotFoundError,
    CapacityExceededError,
    EncodingFailure,
    LayoutDefect,
    QRPublishError,
    StorageError,
    UnsupportedCharacterError,
    ValidationError,
)
from .qr_generator import Symbol, encode_text, evaluate_all_masks, make_qr
from .renderer import RenderedImage, render_symbol, to_data_url
from .publisher import Publisher, PublishResult, PublishState
from .resolver import ConfiguredBaseURL, ProxyPath, ResolverChain
from .storage import BlobStore, FileSystemBlobStore, MemoryBlobStore, generate_key

__all__ = [
    'EncodeOptions',
    'PublishSettings',
    'BlobNotFoundError',
    'CapacityExceededError',
    'EncodingFailure',
    'LayoutDefect',
    'QRPublishError',
    'StorageError',
    'UnsupportedCharacterError',
    'ValidationError',
    'Symbol',
    'encode_text',
    'evaluate_all_masks',
    'make_qr',
    'RenderedImage',
    'render_symbol',
    'to_data_url',
    'Publisher',
    'PublishResult',
    'PublishState',
    'ConfiguredBaseURL',
    'ProxyPath',
    'ResolverChain',
    'BlobStore',
    'FileSystemBlobStore',
    'MemoryBlobStore',
    'generate_key',
]
