"""Tests for colors, palettes and repartition tables."""

import pytest

from tiledraw.errors import ConfigurationError
from tiledraw.render.palette import (
    DEFAULT_COARSE_REPARTITION, DEFAULT_FINE_REPARTITION, DEFAULT_RAMP, Color,
    flag_buckets, get_color_palette, interpolate_palette, parse_ramp,
    resolve_palette, validate_palette, validate_repartition,
)


class TestColor:
    """Tests for color parsing and arithmetic."""

    @pytest.mark.parametrize("text", ["FF8C8C", "#ff8c8c", "0xFF8C8C"])
    def test_from_hex(self, text):
        assert Color.from_hex(text) == Color(255, 140, 140)

    def test_from_int(self):
        assert Color.from_int(0x1E1E8C) == Color(30, 30, 140)

    @pytest.mark.parametrize("text", ["FFF", "GGGGGG", ""])
    def test_invalid_hex(self, text):
        with pytest.raises(ConfigurationError):
            Color.from_hex(text)

    def test_arithmetic_truncates(self):
        a = Color(10, 20, 30)
        b = Color(15, 25, 35)

        assert a + b == Color(25, 45, 65)
        assert b - a == Color(5, 5, 5)
        assert 0.5 * Color(255, 3, 1) == Color(127, 1, 0)
        assert 0.5 * Color(-3, 0, 0) == Color(-1, 0, 0)

    def test_svg_notation(self):
        assert Color(1, 2, 3).to_rgb() == "rgb(1,2,3)"
        assert Color(255, 0, 16).to_hex() == "#ff0010"


class TestPalettes:
    """Tests for palette selection and interpolation."""

    @pytest.mark.parametrize("index", [0, 1, 2, 3])
    def test_predefined_palettes_have_five_colors(self, index):
        assert len(get_color_palette(index)) == 5

    def test_red_palette(self):
        assert get_color_palette(3)[0] == Color(222, 10, 20)

    def test_unknown_palette_index(self):
        with pytest.raises(ConfigurationError):
            get_color_palette(4)

    def test_interpolation_black_to_white(self):
        palette = interpolate_palette(Color.from_int(0x000000), Color.from_int(0xFFFFFF))

        assert len(palette) == 5
        assert palette[0] == Color(0, 0, 0)
        assert palette[1] == Color(63, 63, 63)
        assert palette[2] == Color(127, 127, 127)
        assert palette[3] == Color(191, 191, 191)
        assert palette[4] == Color(255, 255, 255)

    def test_interpolation_descending(self):
        palette = interpolate_palette(Color(200, 100, 0), Color(0, 100, 200))
        assert palette[2] == Color(100, 100, 100)

    def test_resolve_by_index(self):
        assert resolve_palette(index=2) == get_color_palette(2)

    def test_resolve_default(self):
        assert resolve_palette() == get_color_palette(0)

    def test_resolve_by_colors(self):
        palette = resolve_palette(color_begin="000000", color_end="FFFFFF")
        assert palette[2] == Color(127, 127, 127)

    def test_index_and_colors_are_exclusive(self):
        with pytest.raises(ConfigurationError):
            resolve_palette(index=1, color_begin="000000", color_end="FFFFFF")

    @pytest.mark.parametrize("begin, end", [("000000", None), (None, "FFFFFF")])
    def test_colors_go_together(self, begin, end):
        with pytest.raises(ConfigurationError):
            resolve_palette(color_begin=begin, color_end=end)

    def test_palette_size_enforced(self):
        with pytest.raises(ConfigurationError):
            validate_palette(get_color_palette(0)[:4])

    def test_ramp(self):
        assert len(DEFAULT_RAMP) == 11
        assert parse_ramp(["#000000"] * 11)[5] == Color(0, 0, 0)
        with pytest.raises(ConfigurationError):
            parse_ramp(["#000000"] * 10)


class TestRepartition:
    """Tests for repartition tables."""

    @pytest.mark.parametrize("table", [DEFAULT_COARSE_REPARTITION, DEFAULT_FINE_REPARTITION])
    def test_default_tables_sum_to_flag_count(self, table):
        assert sum(table) == 11
        assert validate_repartition(table) == tuple(table)

    @pytest.mark.parametrize("table", [DEFAULT_COARSE_REPARTITION, DEFAULT_FINE_REPARTITION])
    def test_every_flag_in_exactly_one_bucket(self, table):
        buckets = flag_buckets(table)
        assert [flag for _, flag in buckets] == list(range(11))

    def test_coarse_bucket_layout(self):
        colors = [c for c, _ in flag_buckets(DEFAULT_COARSE_REPARTITION)]
        assert colors == [0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 4]

    def test_fine_layer_skips_lightest_color(self):
        colors = [c for c, _ in flag_buckets(DEFAULT_FINE_REPARTITION)]
        assert colors == [1, 1, 1, 2, 2, 3, 3, 4, 4, 4, 4]

    @pytest.mark.parametrize("table", [
        (2, 2, 2, 2, 2),
        (2, 2, 2, 2, 3, 0),
        (4, -1, 2, 2, 4),
    ])
    def test_malformed_tables_rejected(self, table):
        with pytest.raises(ConfigurationError):
            validate_repartition(table)
