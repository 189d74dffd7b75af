"""Seeded random streams for roaming target selection.

Every named domain gets its own ``Random`` seeded from ``crc32`` of the
master seed and the domain name. Two sessions started with the same seed
therefore roam to the same cells, and draws in one domain never shift
another.

Usage:
    from dinnerlady.util import rng
    rng.init("dinnertime")

    _rng = rng.get("ai.random_target")
    row, col = _rng.choice(grid.walkable_cells())

Stream handles fetched before a reseed keep working afterwards.
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeAlias, TypeVar

if TYPE_CHECKING:
    from dinnerlady.types import RandomSeed

T = TypeVar("T")


class RNGStream:
    """Handle on one domain that always draws from the provider's live Random."""

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self.domain = domain

    def choice(self, seq: Sequence[T]) -> T:
        """Pick one element of a non-empty sequence."""
        return self._provider.random_for(self.domain).choice(seq)


# Either a plain Random (tests, tooling) or a provider-backed stream.
RNG: TypeAlias = Random | RNGStream


class RNGProvider:
    def __init__(self, master_seed: RandomSeed = None) -> None:
        self.master_seed = master_seed
        self._randoms: dict[str, Random] = {}
        self._streams: dict[str, RNGStream] = {}

    def get(self, domain: str) -> RNGStream:
        stream = self._streams.get(domain)
        if stream is None:
            stream = self._streams[domain] = RNGStream(self, domain)
        return stream

    def random_for(self, domain: str) -> Random:
        """The ``Random`` currently backing ``domain``, created on first use.

        An unseeded provider draws from OS entropy.
        """
        generator = self._randoms.get(domain)
        if generator is None:
            if self.master_seed is None:
                generator = Random()
            else:
                # hash() is salted per process, crc32 is stable.
                seed = zlib.crc32(f"{self.master_seed}:{domain}".encode())
                generator = Random(seed)
            self._randoms[domain] = generator
        return generator

    def reseed(self, master_seed: RandomSeed = None) -> None:
        self.master_seed = master_seed
        self._randoms.clear()


_provider: RNGProvider | None = None


def init(master_seed: RandomSeed = None) -> None:
    """Seed the shared provider, reseeding it in place if it already exists."""
    global _provider
    if _provider is None:
        _provider = RNGProvider(master_seed)
    else:
        _provider.reseed(master_seed)


def get(domain: str) -> RNGStream:
    """Stream for ``domain`` from the shared provider (unseeded until ``init``)."""
    global _provider
    if _provider is None:
        _provider = RNGProvider()
    return _provider.get(domain)
