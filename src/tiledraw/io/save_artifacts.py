"""
Artifact saving utilities for Tile Draw.

Writes SVG documents and JSON metrics. Any failure to open or write the
destination is raised as OutputError.
"""

import json
import os

from tiledraw.errors import OutputError
from tiledraw.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def _write_text(content, path):
    try:
        ensure_dir(os.path.dirname(path))
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        get_tracer().event(f"Cannot open output file: {path}", level="ERROR")
        raise OutputError(f"Cannot write output file {path}: {e.strerror or e}") from e


def save_svg(svg_content, path):
    """
    Save SVG content to file.

    Accepts an svgwrite drawing (anything with tostring) or a string.
    """
    if hasattr(svg_content, "tostring"):
        content = svg_content.tostring()
    else:
        content = str(svg_content)

    _write_text(content, path)
    get_tracer().event(f"Saved SVG: {path}", chars=len(content))


def save_json(data, path, indent=2):
    """Save a dictionary or pydantic model to JSON."""
    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")

    _write_text(json.dumps(data, indent=indent, default=str), path)
    get_tracer().event(f"Saved JSON: {path}")
