"""
Data models for Tile Draw.

Shapes exist in two forms: LabeledShape, a validated per-shape value, and
ShapeSet, an immutable struct-of-arrays batch holding a whole generation.
Run reports are pydantic models so they serialize straight to JSON.
"""

from enum import Enum
from typing import Dict, List, Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from tiledraw.geometry import Triangle


FLAG_MIN = 0
FLAG_MAX = 10
FLAG_COUNT = FLAG_MAX - FLAG_MIN + 1


class ShapeKind(str, Enum):
    """Structural role of a shape within its substitution grammar."""
    KITE = "kite"
    DART = "dart"
    RHOMB_CYAN = "rhomb_cyan"  # acute half rhombus, 36 degree apex
    RHOMB_VIOLET = "rhomb_violet"  # obtuse half rhombus, 108 degree apex
    CENTRAL = "central"
    BORDER = "border"

    @property
    def code(self):
        """Integer code used in ShapeSet.kinds."""
        return KIND_ORDER.index(self)

    @classmethod
    def from_code(cls, code):
        return KIND_ORDER[int(code)]


KIND_ORDER = tuple(ShapeKind)


class LabeledShape(BaseModel):
    """A triangle tagged with its kind and its render flag."""
    triangle: Triangle
    kind: ShapeKind
    flag: int = Field(default=0, ge=FLAG_MIN, le=FLAG_MAX)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def vertices(self):
        return self.triangle.vertices


class ShapeSet:
    """
    Immutable batch of labeled triangles.

    vertices has shape (N, 3, 2), kinds and flags have shape (N,). The
    arrays are read-only; every transformation returns a new ShapeSet.
    """

    def __init__(self, vertices, kinds, flags=None):
        vertices = _frozen(vertices, np.float64, (-1, 3, 2))
        kinds = _frozen(kinds, np.int8, (-1,))
        if flags is None:
            flags = np.zeros(len(vertices), dtype=np.int8)
        flags = _frozen(flags, np.int8, (-1,))

        if not (len(vertices) == len(kinds) == len(flags)):
            raise ValueError(
                f"Mismatched shape set arrays: {len(vertices)} vertices, "
                f"{len(kinds)} kinds, {len(flags)} flags"
            )
        if len(kinds) and (kinds.min() < 0 or kinds.max() >= len(KIND_ORDER)):
            raise ValueError("Unknown shape kind code")
        if len(flags) and (flags.min() < FLAG_MIN or flags.max() > FLAG_MAX):
            raise ValueError(f"Flags must lie in [{FLAG_MIN}, {FLAG_MAX}]")

        self.vertices = vertices
        self.kinds = kinds
        self.flags = flags

    @classmethod
    def empty(cls):
        return cls(np.zeros((0, 3, 2)), np.zeros(0), np.zeros(0))

    @classmethod
    def from_shapes(cls, shapes):
        """Build a set from an iterable of LabeledShape."""
        shapes = list(shapes)
        if not shapes:
            return cls.empty()
        return cls(
            [s.triangle.to_array() for s in shapes],
            [s.kind.code for s in shapes],
            [s.flag for s in shapes],
        )

    def to_shapes(self):
        """Expand the set into a list of LabeledShape."""
        return [self[i] for i in range(len(self))]

    def with_flags(self, flags):
        return ShapeSet(self.vertices, self.kinds, flags)

    def select(self, mask):
        """Subset of shapes where mask is true."""
        mask = np.asarray(mask, dtype=bool)
        return ShapeSet(self.vertices[mask], self.kinds[mask], self.flags[mask])

    def kinds_present(self):
        """Kinds that occur in the set, in enumeration order."""
        codes = set(np.unique(self.kinds).tolist())
        return [kind for kind in KIND_ORDER if kind.code in codes]

    def __len__(self):
        return len(self.vertices)

    def __getitem__(self, index):
        return LabeledShape(
            triangle=Triangle.from_array(self.vertices[index]),
            kind=ShapeKind.from_code(self.kinds[index]),
            flag=int(self.flags[index]),
        )

    def __iter__(self):
        for i in range(len(self)):
            yield self[i]

    def __repr__(self):
        return f"ShapeSet(n={len(self)})"


class RenderStats(BaseModel):
    """Counters collected while rendering one tiling."""
    coarse_paths: int = 0
    fine_paths: int = 0
    stroke_paths: int = 0
    coarse_shapes_drawn: int = 0
    fine_shapes_drawn: int = 0
    fine_shapes_omitted: int = 0
    stroke_width: Optional[float] = None

    model_config = ConfigDict(extra="forbid")

    @property
    def total_paths(self):
        return self.coarse_paths + self.fine_paths + self.stroke_paths


class RunSummary(BaseModel):
    """Outcome of one generator run, written as the metrics artifact."""
    generator: str
    level: int
    output_path: str
    shape_counts: Dict[str, int] = Field(default_factory=dict)
    palette: List[str] = Field(default_factory=list)
    render: RenderStats = Field(default_factory=RenderStats)
    elapsed_ms: float = 0.0

    model_config = ConfigDict(extra="forbid")


def _frozen(values, dtype, shape):
    """Read-only array view of values, copying only when the input is writable."""
    array = np.asarray(values, dtype=dtype).reshape(shape)
    if array.flags.writeable:
        array = array.copy()
        array.setflags(write=False)
    return array
