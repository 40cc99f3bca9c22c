# -*- coding: utf-8 -*-
"""
Public URL Resolution

A stored key becomes a public address through an ordered chain of
strategies; the first one that returns an address wins. The usual chain is
a configured public base URL followed by the same-origin proxy path
/images/{key}.
"""

from typing import Optional, Sequence
from urllib.parse import quote

from .errors import ResolutionError

PROXY_PATH = '/images/{key}'


class ConfiguredBaseURL:
    """`{base}/{key}` when a public base URL is configured."""

    def __init__(self, base_url: Optional[str]):
        self.base_url = (base_url or '').strip().rstrip('/') or None

    def __call__(self, key: str) -> Optional[str]:
        if self.base_url is None:
            return None
        return f"{self.base_url}/{quote(key)}"

    def __repr__(self):
        return f"ConfiguredBaseURL({self.base_url!r})"


class ProxyPath:
    """`{origin}/images/{key}`; an empty origin yields a relative path."""

    def __init__(self, origin: str = ''):
        self.origin = (origin or '').rstrip('/')

    def __call__(self, key: str) -> Optional[str]:
        return self.origin + PROXY_PATH.format(key=quote(key))

    def __repr__(self):
        return f"ProxyPath({self.origin!r})"


class ResolverChain:

    def __init__(self, strategies: Sequence):
        self.strategies = list(strategies)

    @classmethod
    def default(cls, public_base_url: Optional[str] = None, origin: str = '') -> 'ResolverChain':
        return cls([ConfiguredBaseURL(public_base_url), ProxyPath(origin)])

    def resolve(self, key: str) -> str:
        for strategy in self.strategies:
            url = strategy(key)
            if url:
                return url
        raise ResolutionError(f"No public address for {key!r} (tried {self.strategies!r})")
