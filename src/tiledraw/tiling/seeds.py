"""
Seed sets for Tile Draw.

The sun seed is six triangles around the canvas center at alternating
60-degree spans, each reaching the canvas size in radius. The square seed
covers the canvas with two right triangles. The wheel seed starts the
rhombus form of the Penrose tiling.
"""

import math

import numpy as np

from tiledraw.models import ShapeKind, ShapeSet


def angle_offset(angle):
    """Angular offset pi / angle in radians; 0 means no offset."""
    return 0.0 if angle == 0 else math.pi / angle


def sun_seed(canvas_size, kind, angle=0):
    """
    Build the six-triangle radial seed.

    Args:
        canvas_size: side of the square canvas, also used as the radius
        kind: ShapeKind given to every seed triangle
        angle: rotate the seed by pi / angle (0 for no rotation)

    Returns:
        ShapeSet with 6 shapes
    """
    radius = float(canvas_size)
    center = np.array([canvas_size / 2.0, canvas_size / 2.0])
    offset = angle_offset(angle)

    triangles = []
    sign = -1
    for i in range(6):
        phi1 = (2 * i - sign) * math.pi / 6 + offset
        phi2 = (2 * i + sign) * math.pi / 6 + offset
        triangles.append([
            radius * np.array([math.cos(phi1), math.sin(phi1)]) + center,
            center,
            radius * np.array([math.cos(phi2), math.sin(phi2)]) + center,
        ])
        sign = -sign

    return ShapeSet(triangles, [kind.code] * len(triangles))


def wheel_seed(canvas_size, angle=0):
    """
    Ten acute half rhombi around the canvas center, the usual start of the
    rhombus tiling. Every other triangle is mirrored so neighbours meet
    along matching edges.

    Returns:
        ShapeSet with 10 RHOMB_CYAN shapes
    """
    radius = float(canvas_size)
    center = np.array([canvas_size / 2.0, canvas_size / 2.0])
    offset = angle_offset(angle)

    triangles = []
    for i in range(10):
        phi1 = (2 * i - 1) * math.pi / 10 + offset
        phi2 = (2 * i + 1) * math.pi / 10 + offset
        b = radius * np.array([math.cos(phi1), math.sin(phi1)]) + center
        c = radius * np.array([math.cos(phi2), math.sin(phi2)]) + center
        if i % 2 == 0:
            b, c = c, b
        triangles.append([center, b, c])

    return ShapeSet(triangles, [ShapeKind.RHOMB_CYAN.code] * len(triangles))


def square_seed(canvas_size, kind=ShapeKind.BORDER):
    """Two right triangles sharing the canvas diagonal."""
    r = float(canvas_size)
    triangles = [
        [[r, 0.0], [0.0, 0.0], [0.0, r]],
        [[r, 0.0], [r, r], [0.0, r]],
    ]
    return ShapeSet(triangles, [kind.code] * len(triangles))


SEED_KINDS = {
    "penrose": ShapeKind.DART,
    "regular": ShapeKind.BORDER,
    "pleasing": ShapeKind.BORDER,
}


def seed_for(generator, canvas_size, angle=0):
    """Seed set used by a named generator."""
    if generator == "pleasing":
        return square_seed(canvas_size, SEED_KINDS[generator])
    if generator == "rhombus":
        return wheel_seed(canvas_size, angle)
    return sun_seed(canvas_size, SEED_KINDS[generator], angle)
