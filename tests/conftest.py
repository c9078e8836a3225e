"""Pytest fixtures for Tile Draw tests."""

import tempfile

import numpy as np
import pytest

from tiledraw.models import ShapeKind, ShapeSet


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def rng():
    """Seeded random generator so failures can be replayed."""
    return np.random.default_rng(1234)


@pytest.fixture
def default_config():
    """Create default tiling configuration."""
    from tiledraw.config import TilingConfig
    return TilingConfig()


@pytest.fixture
def scalene_triangle():
    """Triangle with AB=5, AC=3, BC=4 (right angle at C)."""
    return ShapeSet([[[0.0, 0.0], [5.0, 0.0], [1.8, 2.4]]], [ShapeKind.BORDER.code])


@pytest.fixture
def mixed_triangles():
    """A few unrelated triangles of different shapes and kinds."""
    vertices = [
        [[0.0, 0.0], [10.0, 0.0], [0.0, 10.0]],
        [[3.0, 1.0], [7.0, 9.0], [-2.0, 4.0]],
        [[100.0, 100.0], [160.0, 110.0], [120.0, 190.0]],
        [[0.0, 0.0], [1.0, 0.0], [0.5, 0.866]],
    ]
    kinds = [ShapeKind.DART.code, ShapeKind.KITE.code, ShapeKind.BORDER.code, ShapeKind.CENTRAL.code]
    flags = [0, 3, 7, 10]
    return ShapeSet(vertices, kinds, flags)
