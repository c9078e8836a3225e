"""
Subdivision rules for Tile Draw.

Each rule maps every parent triangle of a ShapeSet to a fixed number of
children for its kind and returns the next generation as a new ShapeSet.
Children of parent i always precede the children of parent i + 1. Rules
work on whole vertex arrays at once; deflate_shape applies the same rule
to one shape.
"""

import numpy as np

from tiledraw.errors import ConfigurationError, SubdivisionInvariantError
from tiledraw.geometry import squared_edge_lengths
from tiledraw.models import ShapeKind, ShapeSet
from tiledraw.tracer import get_tracer, trace


PLEASING_RATIO_MEAN = 0.5
PLEASING_RATIO_STDDEV = 0.3
PLEASING_RATIO_MIN = 0.3
PLEASING_RATIO_MAX = 0.7

GOLDEN_RATIO = (1 + 5 ** 0.5) / 2

# (first endpoint, second endpoint, opposite vertex) for edges AB, AC, BC
_EDGE_VERTICES = np.array([[0, 1, 2], [0, 2, 1], [1, 2, 0]])


def _medial_children(vertices):
    """
    Split each triangle A, B, C into its three corner triangles and the
    medial triangle.

    Returns an array of shape (N, 4, 3, 2) ordered (A,b,c), (B,c,a),
    (C,a,b), (a,b,c).
    """
    A = vertices[:, 0]
    B = vertices[:, 1]
    C = vertices[:, 2]

    a = A + ((B - A) + (C - A)) / 2.0
    b = B + ((A - B) + (C - B)) / 2.0
    c = C + ((A - C) + (B - C)) / 2.0

    return np.stack([
        np.stack([A, b, c], axis=1),
        np.stack([B, c, a], axis=1),
        np.stack([C, a, b], axis=1),
        np.stack([a, b, c], axis=1),
    ], axis=1)


def _four_way(shapes, outer_kind, inner_kind):
    children = _medial_children(shapes.vertices)
    n = len(shapes)
    kinds = np.tile(
        np.array([outer_kind.code, outer_kind.code, outer_kind.code, inner_kind.code], dtype=np.int8),
        n,
    )
    return ShapeSet(
        children.reshape(n * 4, 3, 2),
        kinds,
        np.repeat(shapes.flags, 4),
    )


def deflate_penrose(shapes, rng=None):
    """
    Golden-ratio kite/dart substitution.

    Every parent yields three darts (A,b,c), (B,c,a), (C,a,b) and one kite
    (a,b,c). The golden ratio lives in the seed construction, so the rule
    itself only needs the point construction. Flags are inherited.
    """
    return _four_way(shapes, ShapeKind.DART, ShapeKind.KITE)


def deflate_regular(shapes, rng=None):
    """
    Regular centroid subdivision: three border corner triangles and one
    central medial triangle, each similar to the parent at half scale.
    """
    return _four_way(shapes, ShapeKind.BORDER, ShapeKind.CENTRAL)


def deflate_rhombus(shapes, rng=None):
    """
    Robinson triangle substitution for the rhombus (P3) tiling.

    Vertex 0 is the apex of every half rhombus. An acute one A, B, C
    (36 degree apex) splits at P = A + (B - A) / phi into acute (C, P, B)
    and obtuse (P, C, A). An obtuse one (108 degree apex) splits at
    Q = B + (A - B) / phi and R = B + (C - B) / phi into obtuse (R, C, A),
    obtuse (Q, R, B) and acute (R, Q, A). Flags are inherited.

    Raises:
        SubdivisionInvariantError: if a shape is not a half rhombus
    """
    cyan = ShapeKind.RHOMB_CYAN.code
    violet = ShapeKind.RHOMB_VIOLET.code

    is_cyan = shapes.kinds == cyan
    is_violet = shapes.kinds == violet
    if not (is_cyan | is_violet).all():
        raise SubdivisionInvariantError("Rhombus rule applied to shapes that are not half rhombi")

    counts = np.where(is_cyan, 2, 3)
    starts = np.cumsum(counts) - counts
    total = int(counts.sum())
    vertices = np.empty((total, 3, 2))
    kinds = np.empty(total, dtype=np.int8)

    A, B, C = (shapes.vertices[is_cyan, i] for i in range(3))
    P = A + (B - A) / GOLDEN_RATIO
    first = starts[is_cyan]
    vertices[first] = np.stack([C, P, B], axis=1)
    vertices[first + 1] = np.stack([P, C, A], axis=1)
    kinds[first] = cyan
    kinds[first + 1] = violet

    A, B, C = (shapes.vertices[is_violet, i] for i in range(3))
    Q = B + (A - B) / GOLDEN_RATIO
    R = B + (C - B) / GOLDEN_RATIO
    first = starts[is_violet]
    vertices[first] = np.stack([R, C, A], axis=1)
    vertices[first + 1] = np.stack([Q, R, B], axis=1)
    vertices[first + 2] = np.stack([R, Q, A], axis=1)
    kinds[first] = violet
    kinds[first + 1] = violet
    kinds[first + 2] = cyan

    return ShapeSet(vertices, kinds, np.repeat(shapes.flags, counts))


def longest_edge_index(vertices):
    """
    Index of the longest edge of each triangle: 0 for AB, 1 for AC, 2 for BC.

    Ties go to the first edge checked, in that order.

    Raises:
        SubdivisionInvariantError: if no edge compares as longest, which only
            happens for non-finite coordinates.
    """
    lengths = squared_edge_lengths(vertices)
    ab = lengths[:, 0]
    ac = lengths[:, 1]
    bc = lengths[:, 2]

    is_ab = (ab >= ac) & (ab >= bc)
    is_ac = ~is_ab & (ac >= ab) & (ac >= bc)
    is_bc = ~is_ab & ~is_ac & (bc >= ab) & (bc >= ac)

    found = is_ab | is_ac | is_bc
    if not found.all():
        bad = int(np.argmin(found))
        raise SubdivisionInvariantError(
            f"No longest edge found for triangle {vertices[bad].tolist()}"
        )

    return np.select([is_ab, is_ac], [0, 1], default=2)


def deflate_pleasing(shapes, rng=None):
    """
    Randomized longest-edge bisection.

    A point D is placed on the longest edge (P, Q) of each parent at a ratio
    drawn from Normal(0.5, 0.3) clamped to [0.3, 0.7], measured from P. The
    children are (R, P, D) and (R, D, Q) where R is the opposite vertex.
    Kind and flag are inherited.
    """
    if rng is None:
        rng = np.random.default_rng()

    vertices = shapes.vertices
    n = len(shapes)
    rows = np.arange(n)

    corners = _EDGE_VERTICES[longest_edge_index(vertices)]
    P = vertices[rows, corners[:, 0]]
    Q = vertices[rows, corners[:, 1]]
    R = vertices[rows, corners[:, 2]]

    ratio = np.clip(
        rng.normal(PLEASING_RATIO_MEAN, PLEASING_RATIO_STDDEV, size=n),
        PLEASING_RATIO_MIN,
        PLEASING_RATIO_MAX,
    )
    D = P + ratio[:, None] * (Q - P)

    children = np.stack([
        np.stack([R, P, D], axis=1),
        np.stack([R, D, Q], axis=1),
    ], axis=1)

    return ShapeSet(
        children.reshape(n * 2, 3, 2),
        np.repeat(shapes.kinds, 2),
        np.repeat(shapes.flags, 2),
    )


RULES = {
    "penrose": deflate_penrose,
    "rhombus": deflate_rhombus,
    "regular": deflate_regular,
    "pleasing": deflate_pleasing,
}


def get_rule(name):
    """Look up a subdivision rule by generator name."""
    try:
        return RULES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown subdivision rule '{name}', expected one of {sorted(RULES)}"
        ) from None


def deflate_shape(shape, rule, rng=None):
    """Apply a rule to a single LabeledShape and return its children."""
    return rule(ShapeSet.from_shapes([shape]), rng).to_shapes()


@trace(label="subdivide")
def subdivide(shapes, rule, level, rng=None):
    """
    Apply a rule level times to a whole working set.

    Args:
        shapes: ShapeSet at level 0
        rule: one of the RULES functions
        level: number of rounds, at least 0
        rng: numpy Generator, needed by randomized rules

    Returns:
        ShapeSet at the requested level
    """
    if level < 0:
        raise ConfigurationError(f"Subdivision level must be >= 0, got {level}")

    tracer = get_tracer()

    for round_index in range(level):
        shapes = rule(shapes, rng)
        tracer.event(f"Round {round_index + 1}/{level}", level="DEBUG", shapes=len(shapes))

    tracer.event(f"Subdivided to level {level}", shapes=len(shapes))
    return shapes
