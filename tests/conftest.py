# -*- coding: utf-8 -*-
import pytest

from qrpublish.config import PublishSettings
from qrpublish.publisher import Publisher
from qrpublish.storage import MemoryBlobStore


@pytest.fixture
def store():
    return MemoryBlobStore()


@pytest.fixture
def publisher(store):
    return Publisher(store, PublishSettings())


@pytest.fixture
def png_payload():
    """A 2 KB payload starting with the PNG signature."""
    body = bytes(i % 251 for i in range(2048 - 8))
    return b'\x89PNG\r\n\x1a\n' + body
