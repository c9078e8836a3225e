"""Random render flags for finished generations."""

import numpy as np

from tiledraw.models import FLAG_MAX, FLAG_MIN
from tiledraw.tracer import get_tracer, trace


@trace(label="assign_random_flags")
def assign_random_flags(shapes, rng=None):
    """
    Give every shape an independent uniform flag in [0, 10].

    Any previous flag is replaced. Kinds are ignored. Returns a new ShapeSet.
    """
    if rng is None:
        rng = np.random.default_rng()

    flags = rng.integers(FLAG_MIN, FLAG_MAX, size=len(shapes), endpoint=True)
    get_tracer().event("Flags assigned", shapes=len(shapes))
    return shapes.with_flags(flags)
