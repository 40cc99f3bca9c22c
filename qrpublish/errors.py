# -*- coding: utf-8 -*-
"""
Error Taxonomy

Every failure raised by the encoder and the publish workflow derives from
QRPublishError, except LayoutDefect which signals a bug in the encoder itself.
"""


class QRPublishError(Exception):
    """Base class for all expected failures."""


class ValidationError(QRPublishError):
    """Bad or missing input. Raised before any side effect."""


class CapacityExceededError(QRPublishError):
    """The text does not fit into any allowed version at the requested level."""

    def __init__(self, message: str, ecc: str = None, required_bits: int = None):
        super().__init__(message)
        self.ecc = ecc
        self.required_bits = required_bits


class EncodingFailure(QRPublishError):
    """Unexpected failure while encoding or rendering a symbol."""


class UnsupportedCharacterError(EncodingFailure):
    """A character could not be represented in byte mode."""


class StorageError(QRPublishError):
    """The blob store could not complete a read or write."""


class BlobNotFoundError(QRPublishError):
    """No blob is stored under the requested key."""

    def __init__(self, key: str):
        super().__init__(f"No blob stored under key {key!r}")
        self.key = key


class ResolutionError(QRPublishError):
    """No strategy could derive a public address for a stored key."""


class LayoutDefect(AssertionError):
    """Codeword stream and free cells disagree. Always a programming error."""
