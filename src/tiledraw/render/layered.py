"""
Layered stochastic renderer for Tile Draw.

Draws a coarse generation, then an optional finer generation on top of it
with random holes, then an optional outline overlay. Shapes are grouped
into one path per bucket, either through a repartition table over a
5-color palette ("table" mode) or with one ramp color per flag value and
kind ("ramp" mode).
"""

import math

import numpy as np

from tiledraw.errors import ConfigurationError
from tiledraw.models import FLAG_COUNT, FLAG_MAX, FLAG_MIN, RenderStats
from tiledraw.render.palette import (
    BLACK, DEFAULT_COARSE_REPARTITION, DEFAULT_FINE_REPARTITION, DEFAULT_RAMP,
    Stroke, flag_buckets, validate_palette, validate_ramp, validate_repartition,
)
from tiledraw.render.svg_document import SvgDocument
from tiledraw.tracer import get_tracer, trace


RENDER_MODES = ("table", "ramp")
DEFAULT_STROKE_DIVISOR = 20.0


def flag_equals(flag):
    """Predicate selecting shapes whose flag equals flag."""
    def predicate(shapes):
        return shapes.flags == flag
    return predicate


def kind_and_flag_equal(kind, flag):
    """Predicate selecting shapes of one kind with one flag."""
    def predicate(shapes):
        return (shapes.kinds == kind.code) & (shapes.flags == flag)
    return predicate


def with_holes(predicate, threshold, rng):
    """
    Wrap a predicate so each selected shape survives only if a fresh
    uniform integer draw in [0, 10] is at least threshold.

    Threshold 0 keeps every shape; threshold t keeps (11 - t) / 11 of them
    on average.
    """
    def holed(shapes):
        mask = predicate(shapes)
        candidates = np.flatnonzero(mask)
        draws = rng.integers(FLAG_MIN, FLAG_MAX, size=len(candidates), endpoint=True)
        kept = np.zeros_like(mask)
        kept[candidates[draws >= threshold]] = True
        return kept
    return holed


def stroke_width_for(shapes, divisor=DEFAULT_STROKE_DIVISOR):
    """Length of the first edge of the first shape, divided by divisor."""
    v0, v1 = shapes.vertices[0, 0], shapes.vertices[0, 1]
    return math.sqrt(float(np.sum((v0 - v1) ** 2))) / divisor


def _emit(document, shapes, predicate, fill):
    """Add one filled path with the shapes matching predicate; return how many."""
    mask = predicate(shapes)
    document.add_path(shapes.vertices[mask], fill=fill)
    return int(np.count_nonzero(mask))


def _table_layer(palette, table, predicate_for):
    for color_index, flag in flag_buckets(table):
        yield palette[color_index], predicate_for(flag)


def _ramp_layer(shapes, ramp, kind_ramps):
    for kind in shapes.kinds_present():
        kind_ramp = kind_ramps.get(kind, ramp)
        for flag in range(FLAG_COUNT):
            yield kind_ramp[flag], kind_and_flag_equal(kind, flag)


def check_threshold(threshold):
    """Return threshold as an int, rejecting non-integers and values outside [0, 10]."""
    if isinstance(threshold, bool) or int(threshold) != threshold:
        raise ConfigurationError(f"Hole threshold must be an integer, got {threshold!r}")
    threshold = int(threshold)
    if not FLAG_MIN <= threshold <= FLAG_MAX:
        raise ConfigurationError(f"Hole threshold must lie in [0, 10], got {threshold}")
    return threshold


@trace(label="render_tiling")
def render_tiling(document, coarse, fine=None, palette=None, strokes=False, threshold=0,
                  coarse_repartition=DEFAULT_COARSE_REPARTITION,
                  fine_repartition=DEFAULT_FINE_REPARTITION,
                  mode="table", ramp=DEFAULT_RAMP, kind_ramps=None,
                  stroke_color=BLACK, stroke_divisor=DEFAULT_STROKE_DIVISOR, rng=None):
    """
    Emit the layered draw commands for a tiling into a drawing sink.

    Args:
        document: SvgDocument (or any sink with add_path)
        coarse: ShapeSet drawn first, without holes
        fine: optional ShapeSet one generation deeper, drawn with holes
        palette: 5 colors, required in table mode
        strokes: add an outline of every coarse shape on top
        threshold: hole threshold in [0, 10]; 0 keeps every fine shape
        coarse_repartition: flag counts per palette color for the coarse layer
        fine_repartition: flag counts per palette color for the fine layer
        mode: "table" or "ramp"
        ramp: 11 colors indexed by flag, used in ramp mode
        kind_ramps: optional {ShapeKind: ramp} overriding ramp per kind
        stroke_color: outline color
        stroke_divisor: outline width is the first coarse edge over this
        rng: numpy Generator for the hole draws

    Returns:
        RenderStats
    """
    tracer = get_tracer()

    if mode not in RENDER_MODES:
        raise ConfigurationError(f"Unknown render mode '{mode}', expected one of {RENDER_MODES}")
    threshold = check_threshold(threshold)
    if rng is None:
        rng = np.random.default_rng()

    if mode == "table":
        if palette is None:
            raise ConfigurationError("Table mode needs a palette")
        palette = validate_palette(palette)
        coarse_repartition = validate_repartition(coarse_repartition)
        fine_repartition = validate_repartition(fine_repartition)
        coarse_layer = _table_layer(palette, coarse_repartition, flag_equals)
        fine_layer = (
            _table_layer(palette, fine_repartition,
                         lambda flag: with_holes(flag_equals(flag), threshold, rng))
            if fine is not None else ()
        )
    else:
        ramp = validate_ramp(ramp)
        kind_ramps = {kind: validate_ramp(r) for kind, r in (kind_ramps or {}).items()}
        coarse_layer = _ramp_layer(coarse, ramp, kind_ramps)
        fine_layer = (
            ((color, with_holes(predicate, threshold, rng))
             for color, predicate in _ramp_layer(fine, ramp, kind_ramps))
            if fine is not None else ()
        )

    stats = RenderStats()

    for fill, predicate in coarse_layer:
        stats.coarse_shapes_drawn += _emit(document, coarse, predicate, fill)
        stats.coarse_paths += 1
    tracer.event("Coarse layer drawn", paths=stats.coarse_paths, shapes=stats.coarse_shapes_drawn)

    for fill, predicate in fine_layer:
        stats.fine_shapes_drawn += _emit(document, fine, predicate, fill)
        stats.fine_paths += 1
    if fine is not None:
        stats.fine_shapes_omitted = len(fine) - stats.fine_shapes_drawn
        tracer.event("Fine layer drawn", paths=stats.fine_paths,
                     shapes=stats.fine_shapes_drawn, holes=stats.fine_shapes_omitted)

    if strokes:
        if len(coarse) == 0:
            tracer.event("No coarse shapes, skipping outline", level="WARN")
        else:
            stats.stroke_width = stroke_width_for(coarse, stroke_divisor)
            document.add_path(coarse.vertices, fill=None,
                              stroke=Stroke(color=stroke_color, width=stats.stroke_width))
            stats.stroke_paths += 1
            tracer.event("Outline drawn", width=stats.stroke_width)

    return stats


@trace(label="save_tiling")
def save_tiling(path, coarse, fine=None, canvas_size=2000, background=BLACK, **render_options):
    """
    Render a tiling on a fresh square canvas and write it to path.

    Keyword arguments are passed through to render_tiling. Output errors
    from the sink propagate unchanged.

    Returns:
        RenderStats
    """
    document = SvgDocument(canvas_size, canvas_size, background)
    stats = render_tiling(document, coarse, fine, **render_options)
    document.save(path)
    return stats
