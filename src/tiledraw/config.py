"""
Configuration management for Tile Draw.

Loads YAML configuration with defaults for every stage. Values left at None
fall back to the defaults of the chosen generator.
"""

import os
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

import yaml

from tiledraw.render.palette import DEFAULT_COARSE_REPARTITION, DEFAULT_FINE_REPARTITION


@dataclass
class CanvasConfig:
    """Configuration for the output canvas."""
    size: int = 2000
    background: str = "#000000"


@dataclass
class SubdivisionConfig:
    """Configuration for the subdivision rounds."""
    level: Optional[int] = None  # None: generator default
    angle: int = 0  # seed rotation pi / angle, 0 for none
    rhombus: bool = False  # penrose only: rhombus (P3) form instead of kite and dart


@dataclass
class PaletteConfig:
    """Configuration for palette selection."""
    index: Optional[int] = None
    color_begin: Optional[str] = None
    color_end: Optional[str] = None


@dataclass
class RenderConfig:
    """Configuration for the layered renderer."""
    mode: str = "table"  # "table" or "ramp"
    strokes: bool = False
    threshold: Optional[int] = None  # None: generator default, else 0..10
    coarse_repartition: List[int] = field(default_factory=lambda: list(DEFAULT_COARSE_REPARTITION))
    fine_repartition: List[int] = field(default_factory=lambda: list(DEFAULT_FINE_REPARTITION))
    stroke_divisor: float = 20.0
    stroke_color: str = "#000000"
    ramp: Optional[List[str]] = None  # 11 hex colors, darkest first
    kind_ramps: Dict[str, List[str]] = field(default_factory=dict)  # kind name -> 11 hex colors


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: Optional[str] = None


@dataclass
class GeneratorDefaults:
    """Per-generator fallbacks for options left unset."""
    level: int
    threshold: int
    fine_layer: bool


GENERATOR_DEFAULTS = {
    "penrose": GeneratorDefaults(level=7, threshold=7, fine_layer=True),
    "regular": GeneratorDefaults(level=7, threshold=9, fine_layer=True),
    "pleasing": GeneratorDefaults(level=11, threshold=0, fine_layer=False),
}


@dataclass
class TilingConfig:
    """Complete generator configuration."""
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    subdivision: SubdivisionConfig = field(default_factory=SubdivisionConfig)
    palette: PaletteConfig = field(default_factory=PaletteConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


SECTIONS = ("canvas", "subdivision", "palette", "render", "tracing")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values. Unknown keys are ignored.
    """
    config = TilingConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass."""
    for section_name in SECTIONS:
        section_data = yaml_data.get(section_name) or {}
        section = getattr(config, section_name)
        for key, value in section_data.items():
            if hasattr(section, key):
                setattr(section, key, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    yaml_data = asdict(TilingConfig())

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
