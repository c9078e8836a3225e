"""
Command-line interface for Tile Draw.

One subcommand per generator plus a command that writes the default
configuration.
"""

import argparse
import sys

from tiledraw.config import GENERATOR_DEFAULTS, PaletteConfig, load_config, save_default_config
from tiledraw.render.palette import PALETTE_NAMES
from tiledraw.tracer import configure_tracer, get_tracer


# Level the palettes and tables were tuned for; four-child rules default lower
FULL_DETAIL_LEVEL = 11

GENERATOR_HELP = {
    "penrose": "Penrose kite and dart tiling from a six-triangle sun seed, or rhombus tiling",
    "regular": "Regular 4-way triangle subdivision from a six-triangle sun seed",
    "pleasing": "Randomized longest-edge bisection of the square canvas",
}


def _add_generator_arguments(parser, generator):
    defaults = GENERATOR_DEFAULTS[generator]
    palette_help = ", ".join(f"{i}: {name}" for i, name in PALETTE_NAMES.items())
    level_help = f"Number of subdivisions (default: {defaults.level}"
    if defaults.level < FULL_DETAIL_LEVEL:
        level_help += f", lowered from {FULL_DETAIL_LEVEL} to bound memory"
    level_help += ")"

    parser.add_argument(
        "--output", "-o",
        required=True,
        help="Output filename (.svg)",
    )
    parser.add_argument(
        "--level", "-l",
        type=int,
        default=None,
        help=level_help,
    )
    parser.add_argument(
        "--color",
        type=int,
        default=None,
        help=f"Color palette ({palette_help})",
    )
    parser.add_argument(
        "--color-begin",
        default=None,
        help="First color in hex format, requires --color-end",
    )
    parser.add_argument(
        "--color-end",
        default=None,
        help="Last color in hex format, requires --color-begin",
    )
    parser.add_argument(
        "--strokes",
        action="store_true",
        default=None,
        help="Draw the outline of every coarse shape",
    )
    parser.add_argument(
        "--mode",
        choices=["table", "ramp"],
        default=None,
        help="Bucket shapes through the palette table or a per-flag color ramp",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed the random generator (debugging only)",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--metrics",
        default=None,
        help="Write a JSON run summary to this path",
    )
    if generator != "pleasing":
        parser.add_argument(
            "--angle",
            type=int,
            default=None,
            help="Rotate the seed by pi / ANGLE (0: no rotation)",
        )
        parser.add_argument(
            "--threshold",
            type=int,
            default=None,
            help=f"Threshold for holes in [0, 10], 0 for no holes (default: {defaults.threshold})",
        )
    if generator == "penrose":
        parser.add_argument(
            "--rhombus",
            action="store_true",
            default=None,
            help="Use the rhombus (P3) form instead of kite and dart (P2)",
        )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Enable runtime tracing",
    )
    parser.add_argument(
        "--trace-level",
        default=None,
        choices=["ERROR", "WARN", "INFO", "DEBUG"],
        help="Trace log level",
    )
    parser.add_argument(
        "--trace-file",
        default=None,
        help="Path to write trace logs",
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="tiledraw",
        description="Tile Draw: generate layered substitution tiling backgrounds as SVG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for generator, help_text in GENERATOR_HELP.items():
        generator_parser = subparsers.add_parser(generator, help=help_text)
        _add_generator_arguments(generator_parser, generator)

    init_parser = subparsers.add_parser("init-config", help="Create default config file")
    init_parser.add_argument(
        "--out", "-o",
        default="tiledraw_config.yaml",
        help="Output path for config file",
    )

    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "init-config":
        return handle_init_config(args)

    return handle_generate(args)


def apply_overrides(config, args):
    """Copy options given on the command line over the loaded configuration."""
    if args.level is not None:
        config.subdivision.level = args.level
    if getattr(args, "angle", None) is not None:
        config.subdivision.angle = args.angle
    if getattr(args, "threshold", None) is not None:
        config.render.threshold = args.threshold
    if getattr(args, "rhombus", None):
        config.subdivision.rhombus = True
    if args.strokes:
        config.render.strokes = True
    if args.mode is not None:
        config.render.mode = args.mode

    # A palette choice on the command line replaces the configured one
    if args.color is not None or args.color_begin is not None or args.color_end is not None:
        config.palette = PaletteConfig(
            index=args.color,
            color_begin=args.color_begin,
            color_end=args.color_end,
        )

    if args.trace:
        config.tracing.enabled = True
    if args.trace_level is not None:
        config.tracing.level = args.trace_level
    if args.trace_file is not None:
        config.tracing.file_path = args.trace_file

    return config


def handle_generate(args):
    """Handle a generator command."""
    tracer = get_tracer()

    try:
        from tiledraw.pipeline import run_generation

        config = apply_overrides(load_config(args.config), args)
        configure_tracer(
            enabled=config.tracing.enabled,
            level=config.tracing.level,
            file_path=config.tracing.file_path,
        )

        with tracer.span(f"cli_{args.command}", module="cli"):
            summary = run_generation(
                args.command,
                args.output,
                config=config,
                seed=args.seed,
                metrics_path=args.metrics,
            )

        print(f"Tiling saved to: {summary.output_path}")
        print(f"  Level: {summary.level}")
        for name, count in summary.shape_counts.items():
            print(f"  {name.capitalize()} shapes: {count}")
        print(f"  Paths: {summary.render.total_paths}")
        print(f"Execution time: {summary.elapsed_ms:.2f} ms")

        return 0

    except Exception as e:
        tracer.event(f"Generation failed: {str(e)}", level="ERROR")
        print(f"\nError: {str(e)}", file=sys.stderr)
        return 1

    finally:
        tracer.config.close()


def handle_init_config(args):
    """Handle the init-config command."""
    save_default_config(args.out)
    print(f"Default configuration saved to: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
