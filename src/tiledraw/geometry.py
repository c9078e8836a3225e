"""
Geometry primitives for Tile Draw.

Immutable points and polygons for per-shape work, plus numpy helpers that
apply the same operations to whole vertex arrays of shape (N, k, 2).
"""

from typing import Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict


class Point(BaseModel):
    """A 2D coordinate."""
    x: float
    y: float

    model_config = ConfigDict(frozen=True)

    def __init__(self, x, y, **data):
        super().__init__(x=x, y=y, **data)

    def __add__(self, other):
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, value):
        return Point(self.x * value, self.y * value)

    __rmul__ = __mul__

    def __truediv__(self, value):
        return Point(self.x / value, self.y / value)

    def to_array(self):
        return np.array([self.x, self.y], dtype=np.float64)

    @classmethod
    def from_array(cls, values):
        return cls(float(values[0]), float(values[1]))


def norm(point):
    """Squared magnitude of a point seen as a vector."""
    return point.x * point.x + point.y * point.y


class Triangle(BaseModel):
    """Ordered triple of vertices. Order sets the drawing order."""
    vertices: Tuple[Point, Point, Point]

    model_config = ConfigDict(frozen=True)

    def __init__(self, a, b, c, **data):
        super().__init__(vertices=(a, b, c), **data)

    def to_array(self):
        return np.array([v.to_array() for v in self.vertices])

    @classmethod
    def from_array(cls, values):
        return cls(*(Point.from_array(v) for v in values))


class Quadrilateral(BaseModel):
    """Ordered quadruple of vertices, drawn v0 -> v1 -> v3 -> v2."""
    vertices: Tuple[Point, Point, Point, Point]

    model_config = ConfigDict(frozen=True)

    def __init__(self, a, b, c, d, **data):
        super().__init__(vertices=(a, b, c, d), **data)

    def to_array(self):
        return np.array([v.to_array() for v in self.vertices])

    @classmethod
    def from_array(cls, values):
        return cls(*(Point.from_array(v) for v in values))


# Vertex visiting order of the closed path drawn for each polygon size
TRIANGLE_PATH_ORDER = (2, 0, 1)
QUADRILATERAL_PATH_ORDER = (0, 1, 3, 2)


def triangle_area(triangle):
    """Unsigned area of a Triangle."""
    a, b, c = triangle.vertices
    return abs((b.x - a.x) * (c.y - a.y) - (c.x - a.x) * (b.y - a.y)) / 2.0


def triangle_areas(vertices):
    """Unsigned areas of an (N, 3, 2) vertex array."""
    vertices = np.asarray(vertices, dtype=np.float64)
    ab = vertices[:, 1] - vertices[:, 0]
    ac = vertices[:, 2] - vertices[:, 0]
    return np.abs(ab[:, 0] * ac[:, 1] - ac[:, 0] * ab[:, 1]) / 2.0


def squared_edge_lengths(vertices):
    """
    Squared lengths of the edges AB, AC and BC.

    Args:
        vertices: array of shape (..., 3, 2)

    Returns:
        array of shape (..., 3) ordered AB, AC, BC
    """
    vertices = np.asarray(vertices, dtype=np.float64)
    a = vertices[..., 0, :]
    b = vertices[..., 1, :]
    c = vertices[..., 2, :]
    return np.stack([
        np.sum((b - a) ** 2, axis=-1),
        np.sum((c - a) ** 2, axis=-1),
        np.sum((c - b) ** 2, axis=-1),
    ], axis=-1)


def polygon_to_path(vertices):
    """
    Closed SVG path data for one polygon given as a (k, 2) array.

    Triangles and quadrilaterals are walked in their fixed drawing order.
    """
    if len(vertices) == 3:
        order = TRIANGLE_PATH_ORDER
    elif len(vertices) == 4:
        order = QUADRILATERAL_PATH_ORDER
    else:
        raise ValueError(f"Unsupported polygon with {len(vertices)} vertices")

    first, *rest = (vertices[i] for i in order)
    parts = [f"M {first[0]:.2f} {first[1]:.2f}"]
    parts.extend(f"L {p[0]:.2f} {p[1]:.2f}" for p in rest)
    parts.append("Z")
    return " ".join(parts)


def polygons_to_path(polygons):
    """
    Concatenate the closed paths of many polygons into one path data string.

    Accepts Triangle/Quadrilateral values or a vertex array of shape (N, k, 2).
    """
    if isinstance(polygons, np.ndarray):
        arrays = polygons
    else:
        arrays = [p.to_array() for p in polygons]
    return " ".join(polygon_to_path(v) for v in arrays)
