"""
Main pipeline orchestrator for Tile Draw.

Seeds a generator, runs the subdivision rounds, tags the coarse and fine
generations with random flags, renders them and writes the SVG.
"""

import time

import numpy as np

from tiledraw.config import GENERATOR_DEFAULTS, load_config
from tiledraw.errors import ConfigurationError
from tiledraw.io.save_artifacts import save_json
from tiledraw.models import RunSummary, ShapeKind
from tiledraw.render.layered import RENDER_MODES, check_threshold, save_tiling
from tiledraw.render.palette import (
    Color, parse_ramp, resolve_palette, validate_repartition, DEFAULT_RAMP,
)
from tiledraw.tiling.flags import assign_random_flags
from tiledraw.tiling.seeds import seed_for
from tiledraw.tiling.subdivision import get_rule, subdivide
from tiledraw.tracer import get_tracer, trace


def resolve_options(generator, config):
    """
    Turn a TilingConfig into concrete render and subdivision options.

    Every configuration error is raised here, before any geometry work.
    """
    if generator not in GENERATOR_DEFAULTS:
        raise ConfigurationError(
            f"Unknown generator '{generator}', expected one of {sorted(GENERATOR_DEFAULTS)}"
        )
    defaults = GENERATOR_DEFAULTS[generator]

    level = defaults.level if config.subdivision.level is None else int(config.subdivision.level)
    if level < 0:
        raise ConfigurationError(f"Subdivision level must be >= 0, got {level}")

    threshold = defaults.threshold if config.render.threshold is None else config.render.threshold
    threshold = check_threshold(threshold)

    if config.render.mode not in RENDER_MODES:
        raise ConfigurationError(
            f"Unknown render mode '{config.render.mode}', expected one of {RENDER_MODES}"
        )

    rhombus = bool(config.subdivision.rhombus)
    if rhombus and generator != "penrose":
        raise ConfigurationError(f"The rhombus form only applies to penrose, not '{generator}'")

    palette = resolve_palette(
        index=config.palette.index,
        color_begin=config.palette.color_begin,
        color_end=config.palette.color_end,
    )

    return {
        "level": level,
        "angle": config.subdivision.angle,
        "rhombus": rhombus,
        "fine_layer": defaults.fine_layer,
        "canvas_size": config.canvas.size,
        "background": Color.from_hex(config.canvas.background),
        "render": {
            "palette": palette,
            "strokes": bool(config.render.strokes),
            "threshold": threshold,
            "coarse_repartition": validate_repartition(config.render.coarse_repartition),
            "fine_repartition": validate_repartition(config.render.fine_repartition),
            "mode": config.render.mode,
            "ramp": parse_ramp(config.render.ramp) if config.render.ramp else DEFAULT_RAMP,
            "kind_ramps": resolve_kind_ramps(config.render.kind_ramps),
            "stroke_color": Color.from_hex(config.render.stroke_color),
            "stroke_divisor": float(config.render.stroke_divisor),
        },
    }


def resolve_kind_ramps(kind_ramps):
    """Map configured kind names to parsed ramps."""
    resolved = {}
    for name, values in (kind_ramps or {}).items():
        try:
            kind = ShapeKind(name)
        except ValueError:
            known = [k.value for k in ShapeKind]
            raise ConfigurationError(
                f"Unknown shape kind '{name}' in kind_ramps, expected one of {known}"
            ) from None
        resolved[kind] = parse_ramp(values)
    return resolved


@trace(label="generate_tiling")
def generate_tiling(generator, level, canvas_size=2000, angle=0, fine_layer=True, rng=None,
                    rhombus=False):
    """
    Build the coarse generation and, optionally, the next finer one.

    Both generations get independent random flags after subdivision ends.
    With rhombus set, the penrose generator uses the rhombus (P3) rule and
    the wheel seed.

    Returns:
        (coarse, fine) ShapeSets; fine is None without a fine layer
    """
    tracer = get_tracer()
    rule_name = "rhombus" if rhombus else generator
    rule = get_rule(rule_name)

    seed = seed_for(rule_name, canvas_size, angle)
    tracer.event("Seeded", rule=rule_name, shapes=len(seed))

    coarse = subdivide(seed, rule, level, rng)
    fine = rule(coarse, rng) if fine_layer else None

    coarse = assign_random_flags(coarse, rng)
    if fine is not None:
        fine = assign_random_flags(fine, rng)

    return coarse, fine


@trace(label="run_generation")
def run_generation(generator, output_path, config=None, config_path=None, seed=None,
                   metrics_path=None):
    """
    Run one generator end to end.

    Args:
        generator: "penrose", "regular" or "pleasing"
        output_path: SVG destination
        config: TilingConfig (optional)
        config_path: path to YAML config file, used when config is None
        seed: optional integer seed for the random generator
        metrics_path: optional path for a JSON RunSummary

    Returns:
        RunSummary
    """
    tracer = get_tracer()
    start = time.perf_counter()

    if config is None:
        config = load_config(config_path)

    options = resolve_options(generator, config)
    rng = np.random.default_rng(seed)

    coarse, fine = generate_tiling(
        generator,
        options["level"],
        canvas_size=options["canvas_size"],
        angle=options["angle"],
        fine_layer=options["fine_layer"],
        rng=rng,
        rhombus=options["rhombus"],
    )

    stats = save_tiling(
        output_path,
        coarse,
        fine,
        canvas_size=options["canvas_size"],
        background=options["background"],
        rng=rng,
        **options["render"],
    )

    shape_counts = {"coarse": len(coarse)}
    if fine is not None:
        shape_counts["fine"] = len(fine)

    summary = RunSummary(
        generator=generator,
        level=options["level"],
        output_path=str(output_path),
        shape_counts=shape_counts,
        palette=[c.to_hex() for c in options["render"]["palette"]],
        render=stats,
        elapsed_ms=(time.perf_counter() - start) * 1000,
    )
    tracer.event(f"Generation finished in {summary.elapsed_ms:.0f} ms", paths=stats.total_paths)

    if metrics_path:
        save_json(summary, metrics_path)

    return summary
