# -*- coding: utf-8 -*-
"""
Publish Orchestrator

Stores an uploaded artifact, resolves its public address and encodes that
address as a QR code. Each request walks an explicit state machine:

    VALIDATING -> STORING -> RESOLVING -> ENCODING -> (SUCCEEDED | DEGRADED) -> RESPONDING

A failed validation ends in REJECTED before anything is stored; a failed
store ends in FAILED. An encoding failure is not fatal: the stored artifact
stays in place and the response reports encoded=False.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .config import EncodeOptions, PublishSettings
from .errors import CapacityExceededError, EncodingFailure, StorageError, ValidationError
from .qr_generator import encode_text
from .renderer import RenderedImage
from .resolver import ResolverChain
from .storage import BlobStore, generate_key

logger = logging.getLogger(__name__)


class PublishState(Enum):
    VALIDATING = 'validating'
    STORING = 'storing'
    RESOLVING = 'resolving'
    ENCODING = 'encoding'
    SUCCEEDED = 'succeeded'
    DEGRADED = 'degraded'
    RESPONDING = 'responding'
    REJECTED = 'rejected'
    FAILED = 'failed'


@dataclass
class PublishResult:
    stored_key: str
    public_url: str
    image: Optional[RenderedImage]
    encoded: bool
    trace: List[PublishState] = field(default_factory=list)
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'storedKey': self.stored_key,
            'publicURL': self.public_url,
            'image': self.image.to_data_url() if self.image is not None else None,
            'encoded': self.encoded,
        }


class Publisher:
    """
    Runs the publish workflow against a blob store.

    Args:
        store (BlobStore): Where uploaded artifacts go
        settings (PublishSettings): Upload limits and encode options
        resolver (ResolverChain): Key to public address; defaults to the
            configured base URL followed by the relative proxy path
        encoder (Callable): text, options -> RenderedImage
        key_factory (Callable): filename, content_type -> key
    """

    def __init__(
        self,
        store: BlobStore,
        settings: PublishSettings = None,
        resolver: ResolverChain = None,
        encoder: Callable[[str, EncodeOptions], RenderedImage] = encode_text,
        key_factory: Callable[[Optional[str], Optional[str]], str] = generate_key
    ):
        self.store = store
        self.settings = settings or PublishSettings()
        self.resolver = resolver or ResolverChain.default(self.settings.public_base_url)
        self.encoder = encoder
        self.key_factory = key_factory

    def validate(self, payload: Optional[bytes], content_type: Optional[str]) -> None:
        if not payload:
            raise ValidationError("Please choose a file to upload")
        if content_type not in self.settings.allowed_content_types:
            raise ValidationError("Unsupported file type, please upload an image")
        if len(payload) > self.settings.max_upload_bytes:
            limit_mb = self.settings.max_upload_bytes / (1024 * 1024)
            raise ValidationError(f"File size must not exceed {limit_mb:g}MB")

    def publish(
        self,
        payload: Optional[bytes],
        content_type: Optional[str],
        filename: Optional[str] = None,
        resolver: ResolverChain = None,
        options: EncodeOptions = None
    ) -> PublishResult:
        """
        Store `payload` and return its public address and QR code.

        Raises:
            ValidationError: Payload missing, of a disallowed type or too large
            StorageError: The blob store rejected the write
        """
        trace = [PublishState.VALIDATING]
        try:
            self.validate(payload, content_type)
        except ValidationError:
            trace.append(PublishState.REJECTED)
            raise

        trace.append(PublishState.STORING)
        key = self.key_factory(filename, content_type)
        try:
            self.store.put(key, payload, content_type)
        except StorageError:
            trace.append(PublishState.FAILED)
            logger.error(f"Storing upload {key} failed", exc_info=True)
            raise

        trace.append(PublishState.RESOLVING)
        public_url = (resolver or self.resolver).resolve(key)

        trace.append(PublishState.ENCODING)
        image = None
        try:
            image = self.encoder(public_url, options or self.settings.encode_options)
        except (EncodingFailure, CapacityExceededError) as ex:
            logger.warning(f"Stored {key} but could not encode {public_url}: {ex}")
            trace.append(PublishState.DEGRADED)
        else:
            trace.append(PublishState.SUCCEEDED)

        trace.append(PublishState.RESPONDING)
        logger.info(f"Published {key} ({len(payload)} bytes, {content_type}) at {public_url}")
        return PublishResult(
            stored_key=key,
            public_url=public_url,
            image=image,
            encoded=image is not None,
            trace=trace,
        )
