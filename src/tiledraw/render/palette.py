"""
Colors, palettes and repartition tables for Tile Draw.

A palette is five colors ordered from the first bucket to the last. A
repartition table says how many consecutive flag values feed each palette
color; it always covers the 11 flag values exactly. A ramp is the
alternative mapping with one color per flag value.
"""

from pydantic import BaseModel, ConfigDict, Field

from tiledraw.errors import ConfigurationError
from tiledraw.models import FLAG_COUNT


PALETTE_SIZE = 5


class Color(BaseModel):
    """RGB color with opacity. Arithmetic truncates components toward zero."""
    r: int
    g: int
    b: int
    opacity: float = Field(default=1.0, ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)

    def __init__(self, r, g, b, opacity=1.0, **data):
        super().__init__(r=r, g=g, b=b, opacity=opacity, **data)

    @classmethod
    def from_int(cls, value, opacity=1.0):
        return cls((value & 0xFF0000) >> 16, (value & 0x00FF00) >> 8, value & 0x0000FF, opacity)

    @classmethod
    def from_hex(cls, text, opacity=1.0):
        """Parse 'RRGGBB', '#RRGGBB' or '0xRRGGBB'."""
        cleaned = text.strip()
        if cleaned.startswith("#"):
            cleaned = cleaned[1:]
        elif cleaned.lower().startswith("0x"):
            cleaned = cleaned[2:]
        if len(cleaned) != 6:
            raise ConfigurationError(f"Invalid hex color '{text}'")
        try:
            value = int(cleaned, 16)
        except ValueError:
            raise ConfigurationError(f"Invalid hex color '{text}'") from None
        return cls.from_int(value, opacity)

    def __add__(self, other):
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __sub__(self, other):
        return Color(self.r - other.r, self.g - other.g, self.b - other.b)

    def __rmul__(self, value):
        return Color(int(value * self.r), int(value * self.g), int(value * self.b))

    __mul__ = __rmul__

    def to_rgb(self):
        """SVG functional notation, e.g. rgb(255,140,140)."""
        return f"rgb({self.r},{self.g},{self.b})"

    def to_hex(self):
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


BLACK = Color(0, 0, 0)


class Stroke(BaseModel):
    """Outline style: color and width."""
    color: Color = BLACK
    width: float = Field(default=1.0, ge=0.0)

    model_config = ConfigDict(frozen=True)


def _palette(*rgb):
    return tuple(Color(*c) for c in rgb)


PALETTES = {
    # light blue
    0: _palette(
        (0x73, 0xF3, 0xFF),
        (0x60, 0xBC, 0xEB),
        (0x48, 0x89, 0xCF),
        (0x29, 0x59, 0xA6),
        (0x0B, 0x29, 0x66),
    ),
    # deep blue
    1: _palette(
        (0x60, 0xCD, 0xDB),
        (0x42, 0x81, 0xA1),
        (0x2D, 0x55, 0x80),
        (0x16, 0x30, 0x59),
        (0x06, 0x17, 0x38),
    ),
    # orange
    2: _palette(
        (0xDB, 0x56, 0x00),
        (0x8C, 0x29, 0x01),
        (0x69, 0x15, 0x00),
        (0x42, 0x05, 0x00),
        (0x26, 0x00, 0x06),
    ),
    # red
    3: _palette(
        (222, 10, 20),
        (171, 10, 20),
        (113, 10, 20),
        (72, 10, 20),
        (24, 10, 10),
    ),
}

PALETTE_NAMES = {0: "blue1", 1: "blue2", 2: "orange", 3: "red"}

# Darkest to lightest, one entry per flag value
DEFAULT_RAMP = _palette(
    (30, 30, 30),
    (45, 35, 40),
    (60, 40, 50),
    (75, 45, 55),
    (100, 70, 70),
    (130, 85, 85),
    (160, 100, 100),
    (190, 115, 115),
    (215, 125, 125),
    (235, 135, 135),
    (255, 140, 140),
)

DEFAULT_COARSE_REPARTITION = (2, 2, 2, 2, 3)
DEFAULT_FINE_REPARTITION = (0, 3, 2, 2, 4)


def get_color_palette(index):
    """Predefined palette by index (0: blue1, 1: blue2, 2: orange, 3: red)."""
    try:
        return PALETTES[index]
    except KeyError:
        raise ConfigurationError(
            f"Unknown color palette index {index}, expected one of {sorted(PALETTES)}"
        ) from None


def interpolate_palette(color_begin, color_end):
    """
    Five stops spread evenly from color_begin to color_end.

    Stop i is color_begin + (i / 4) * (color_end - color_begin).
    """
    delta = color_end - color_begin
    steps = PALETTE_SIZE - 1
    return tuple(color_begin + (i / steps) * delta for i in range(PALETTE_SIZE))


def validate_palette(palette):
    """Return palette as a tuple, rejecting anything that is not 5 colors."""
    palette = tuple(palette)
    if len(palette) != PALETTE_SIZE:
        raise ConfigurationError(f"A palette needs {PALETTE_SIZE} colors, got {len(palette)}")
    return palette


def validate_ramp(ramp):
    """Return ramp as a tuple, rejecting anything that is not 11 colors."""
    ramp = tuple(ramp)
    if len(ramp) != FLAG_COUNT:
        raise ConfigurationError(f"A color ramp needs {FLAG_COUNT} colors, got {len(ramp)}")
    return ramp


def validate_repartition(table, palette_size=PALETTE_SIZE):
    """
    Check a repartition table and return it as a tuple.

    The table needs one non-negative count per palette color and the counts
    must add up to the number of flag values.
    """
    table = tuple(int(v) for v in table)
    if len(table) != palette_size:
        raise ConfigurationError(
            f"Repartition table needs {palette_size} entries, got {len(table)}"
        )
    if any(v < 0 for v in table):
        raise ConfigurationError(f"Repartition table has negative entries: {table}")
    if sum(table) != FLAG_COUNT:
        raise ConfigurationError(
            f"Repartition table must sum to {FLAG_COUNT}, got {sum(table)} for {table}"
        )
    return table


def flag_buckets(table):
    """
    Expand a repartition table into (palette_index, flag) pairs.

    Flags are consumed in increasing order, so every flag in [0, 10] appears
    exactly once.
    """
    buckets = []
    flag = 0
    for color_index, count in enumerate(validate_repartition(table)):
        for _ in range(count):
            buckets.append((color_index, flag))
            flag += 1
    return buckets


def resolve_palette(index=None, color_begin=None, color_end=None):
    """
    Choose the palette from either an index or a begin/end color pair.

    The two forms are mutually exclusive and begin/end go together.
    """
    has_begin = color_begin is not None
    has_end = color_end is not None

    if index is not None and (has_begin or has_end):
        raise ConfigurationError("Palette index and begin/end colors are mutually exclusive")
    if has_begin != has_end:
        raise ConfigurationError("Begin and end colors must both be specified")

    if has_begin:
        return interpolate_palette(_as_color(color_begin), _as_color(color_end))
    return get_color_palette(0 if index is None else index)


def _as_color(value):
    if isinstance(value, Color):
        return value
    if isinstance(value, int):
        return Color.from_int(value)
    return Color.from_hex(str(value))


def parse_ramp(values):
    """Ramp from a list of hex strings or colors."""
    return validate_ramp(_as_color(v) for v in values)
