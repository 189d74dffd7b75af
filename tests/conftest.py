from __future__ import annotations

from collections.abc import Iterator

import pytest

from dinnerlady.util import rng


@pytest.fixture(autouse=True)
def reseed_rng() -> Iterator[None]:
    """Give every test the same deterministic random streams."""
    rng.init("tests")
    yield
    rng.init("tests")
