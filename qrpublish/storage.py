# -*- coding: utf-8 -*-
"""
Blob Store Module

Content-addressed storage for uploaded artifacts plus the key generator.
Keys look like "1712345678901-k3j9xq.png": a millisecond timestamp, six
random base36 characters and the file extension.
"""

import json
import logging
import mimetypes
import os
import re
import secrets
import string
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from .errors import BlobNotFoundError, StorageError

logger = logging.getLogger(__name__)

EXTENSION_MIME_TYPES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'gif': 'image/gif',
    'webp': 'image/webp',
    'svg': 'image/svg+xml',
    'bmp': 'image/bmp',
}
MIME_EXTENSIONS = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/gif': 'gif',
    'image/webp': 'webp',
    'image/svg+xml': 'svg',
    'image/bmp': 'bmp',
}
DEFAULT_EXTENSION = 'png'
DEFAULT_MIME_TYPE = 'application/octet-stream'

_BASE36 = string.digits + string.ascii_lowercase
_KEY_RE = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._-]{0,254}$')
_EXT_RE = re.compile(r'^[a-z0-9]{1,10}$')

_clock_lock = threading.Lock()
_last_millis = 0


def _monotonic_millis() -> int:
    global _last_millis
    with _clock_lock:
        _last_millis = max(_last_millis, time.time_ns() // 1_000_000)
        return _last_millis


def _extension(filename: Optional[str], content_type: Optional[str]) -> str:
    if filename and '.' in filename:
        ext = filename.rsplit('.', 1)[1].lower()
        if _EXT_RE.match(ext):
            return ext
    if content_type:
        if content_type in MIME_EXTENSIONS:
            return MIME_EXTENSIONS[content_type]
        guessed = mimetypes.guess_extension(content_type)
        if guessed:
            return guessed.lstrip('.')
    return DEFAULT_EXTENSION


def generate_key(filename: Optional[str] = None, content_type: Optional[str] = None) -> str:
    """
    Generate a fresh storage key.

    Uniqueness relies on the timestamp plus 36**6 random suffixes; the store
    is never consulted.

    Example:
        >>> generate_key("photo.JPG")  # doctest: +SKIP
        '1712345678901-k3j9xq.jpg'
    """
    suffix = ''.join(secrets.choice(_BASE36) for _ in range(6))
    return f"{_monotonic_millis()}-{suffix}.{_extension(filename, content_type)}"


def mime_type_for(key: str) -> str:
    """Content type implied by the key's extension."""
    ext = key.rsplit('.', 1)[1].lower() if '.' in key else ''
    return EXTENSION_MIME_TYPES.get(ext) or mimetypes.guess_type(key)[0] or DEFAULT_MIME_TYPE


def check_key(key: str) -> str:
    if not isinstance(key, str) or not _KEY_RE.match(key) or '..' in key:
        raise BlobNotFoundError(str(key))
    return key


def writable_key(key: str) -> str:
    """Like check_key, but a malformed key on write is a StorageError."""
    try:
        return check_key(key)
    except BlobNotFoundError:
        raise StorageError(f"Invalid storage key {key!r}") from None


@dataclass(frozen=True)
class StoredBlob:
    data: bytes
    content_type: str


class BlobStore(ABC):
    """Collaborator contract for persisting uploaded artifacts."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store `data` under `key`; raises StorageError on failure."""

    @abstractmethod
    def get(self, key: str) -> StoredBlob:
        """Return the blob under `key`; raises BlobNotFoundError if absent."""


class MemoryBlobStore(BlobStore):
    """Process-local store, safe for concurrent requests."""

    def __init__(self):
        self._blobs: Dict[str, StoredBlob] = {}
        self._lock = threading.Lock()

    def put(self, key: str, data: bytes, content_type: str) -> None:
        writable_key(key)
        with self._lock:
            self._blobs[key] = StoredBlob(bytes(data), content_type)

    def get(self, key: str) -> StoredBlob:
        with self._lock:
            blob = self._blobs.get(key)
        if blob is None:
            raise BlobNotFoundError(key)
        return blob

    def __len__(self) -> int:
        return len(self._blobs)

    def __contains__(self, key: str) -> bool:
        return key in self._blobs


class FileSystemBlobStore(BlobStore):
    """
    Stores each blob as a file under `root` with a JSON sidecar holding its
    content type.
    """

    def __init__(self, root: str):
        self.root = root
        try:
            os.makedirs(root, exist_ok=True)
        except OSError as ex:
            raise StorageError(f"Cannot create storage directory {root}: {ex}") from ex

    def _paths(self, key: str):
        path = os.path.join(self.root, check_key(key))
        return path, path + '.meta.json'

    def put(self, key: str, data: bytes, content_type: str) -> None:
        path, meta_path = self._paths(writable_key(key))
        tmp = f"{path}.{secrets.token_hex(4)}.tmp"
        try:
            with open(tmp, 'wb') as f:
                f.write(data)
            with open(meta_path, 'w', encoding='utf-8') as f:
                json.dump({'content_type': content_type}, f)
            os.replace(tmp, path)
        except OSError as ex:
            logger.error(f"Failed to store {key}: {ex}")
            for leftover in (tmp, meta_path):
                if os.path.exists(leftover):
                    os.remove(leftover)
            raise StorageError(f"Failed to store {key}") from ex

    def get(self, key: str) -> StoredBlob:
        path, meta_path = self._paths(key)
        if not os.path.isfile(path):
            raise BlobNotFoundError(key)
        try:
            with open(path, 'rb') as f:
                data = f.read()
            content_type = None
            if os.path.isfile(meta_path):
                with open(meta_path, encoding='utf-8') as f:
                    content_type = json.load(f).get('content_type')
        except (OSError, ValueError) as ex:
            logger.error(f"Failed to read {key}: {ex}")
            raise StorageError(f"Failed to read {key}") from ex
        return StoredBlob(data, content_type or mime_type_for(key))
