# -*- coding: utf-8 -*-
import os
import re

import pytest

from qrpublish import storage
from qrpublish.errors import BlobNotFoundError, StorageError
from qrpublish.storage import (
    FileSystemBlobStore,
    MemoryBlobStore,
    generate_key,
    mime_type_for,
)

KEY_RE = re.compile(r'^\d{13}-[0-9a-z]{6}\.png$')


def test_key_format():
    assert KEY_RE.match(generate_key())
    assert KEY_RE.match(generate_key("cat.png", "image/png"))


def test_keys_are_unique_and_ordered():
    keys = [generate_key() for _ in range(1000)]
    assert len(set(keys)) == len(keys)
    stamps = [int(key.split('-', 1)[0]) for key in keys]
    assert stamps == sorted(stamps)


@pytest.mark.parametrize("filename, content_type, ext", [
    ("Photo.JPG", "image/jpeg", "jpg"),
    ("archive.tar.gz", None, "gz"),
    ("noext", "image/webp", "webp"),
    (None, "image/svg+xml", "svg"),
    (None, None, "png"),
    ("weird.????", "image/gif", "gif"),
])
def test_key_extension(filename, content_type, ext):
    assert generate_key(filename, content_type).endswith('.' + ext)


def test_mime_type_for():
    assert mime_type_for("1-abcdef.jpg") == 'image/jpeg'
    assert mime_type_for("1-abcdef.svg") == 'image/svg+xml'
    assert mime_type_for("1-abcdef") == 'application/octet-stream'


def test_memory_store_roundtrip(store):
    store.put("1-abcdef.png", b"data", "image/png")
    blob = store.get("1-abcdef.png")
    assert (blob.data, blob.content_type) == (b"data", "image/png")
    assert "1-abcdef.png" in store and len(store) == 1
    with pytest.raises(BlobNotFoundError):
        store.get("missing.png")


def test_memory_store_rejects_bad_keys():
    with pytest.raises(StorageError):
        MemoryBlobStore().put("../escape.png", b"x", "image/png")


def test_file_store_roundtrip(tmp_path):
    fs = FileSystemBlobStore(str(tmp_path / "blobs"))
    fs.put("1-abcdef.webp", b"\x00\x01", "image/webp")
    blob = fs.get("1-abcdef.webp")
    assert (blob.data, blob.content_type) == (b"\x00\x01", "image/webp")
    assert sorted(os.listdir(tmp_path / "blobs")) == ["1-abcdef.webp", "1-abcdef.webp.meta.json"]


def test_file_store_falls_back_to_extension_type(tmp_path):
    (tmp_path / "2-abcdef.jpg").write_bytes(b"jpeg")
    assert FileSystemBlobStore(str(tmp_path)).get("2-abcdef.jpg").content_type == 'image/jpeg'


@pytest.mark.parametrize("key", ["../secret.png", "..", ".hidden", "a/b.png", "missing.png"])
def test_file_store_not_found(tmp_path, key):
    with pytest.raises(BlobNotFoundError):
        FileSystemBlobStore(str(tmp_path)).get(key)


def test_file_store_write_failure(tmp_path, monkeypatch):
    fs = FileSystemBlobStore(str(tmp_path))

    def fail(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(storage.os, "replace", fail)
    with pytest.raises(StorageError):
        fs.put("3-abcdef.png", b"x", "image/png")
    assert os.listdir(tmp_path) == []


def test_file_store_rejects_bad_keys_on_write(tmp_path):
    with pytest.raises(StorageError):
        FileSystemBlobStore(str(tmp_path)).put("../escape.png", b"x", "image/png")
    assert os.listdir(tmp_path) == []
