from __future__ import annotations

import pytest

from polytile.pieces import ShapeCatalog


@pytest.fixture(scope="session")
def catalog() -> ShapeCatalog:
    return ShapeCatalog.generate(4)
