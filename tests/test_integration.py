"""Integration tests for the full generation pipeline."""

import os
import re

import numpy as np
import pytest

from tiledraw.config import TilingConfig
from tiledraw.geometry import triangle_areas
from tiledraw.models import ShapeKind
from tiledraw.pipeline import generate_tiling, run_generation
from tiledraw.render.layered import render_tiling
from tiledraw.render.palette import get_color_palette
from tiledraw.render.svg_document import SvgDocument


class TestIntegration:
    """End-to-end runs from seed to SVG."""

    def test_penrose_level_two_scenario(self, rng):
        """Sun seed, 2000 canvas, level 2, no strokes, no holes."""
        coarse, fine = generate_tiling("penrose", 2, canvas_size=2000, rng=rng)

        assert len(coarse) == 96
        assert len(fine) == 384

        palette = get_color_palette(0)
        document = SvgDocument(2000, 2000)
        stats = render_tiling(document, coarse, fine, palette=palette, strokes=False,
                              threshold=0, rng=rng)

        svg = document.tostring()
        styles = re.findall(r'<path [^>]*style="([^"]*)"', svg)

        assert document.path_count == 22
        assert len(styles) == 22
        assert stats.coarse_paths == 11 and stats.fine_paths == 11
        assert stats.stroke_paths == 0
        assert not any("stroke" in s for s in styles)

        coarse_colors = [palette[i].to_rgb() for i in (0, 0, 1, 1, 2, 2, 3, 3, 4, 4, 4)]
        fine_colors = [palette[i].to_rgb() for i in (1, 1, 1, 2, 2, 3, 3, 4, 4, 4, 4)]
        assert styles == [f"fill:{c}" for c in coarse_colors + fine_colors]

        assert stats.coarse_shapes_drawn == 96
        assert stats.fine_shapes_drawn == 384

    def test_generations_cover_the_same_area(self, rng):
        coarse, fine = generate_tiling("regular", 3, canvas_size=500, rng=rng)
        assert triangle_areas(fine.vertices).sum() == pytest.approx(triangle_areas(coarse.vertices).sum())

    def test_flags_assigned_independently(self, rng):
        coarse, fine = generate_tiling("penrose", 3, rng=rng)

        assert coarse.flags.max() <= 10 and fine.flags.max() <= 10
        # fine flags are fresh draws, not inherited from the coarse parents
        assert not np.array_equal(fine.flags, np.repeat(coarse.flags, 4))

    def test_penrose_kinds(self, rng):
        coarse, _ = generate_tiling("penrose", 1, rng=rng)
        assert set(coarse.kinds_present()) == {ShapeKind.KITE, ShapeKind.DART}

    def test_pleasing_run(self, temp_dir):
        config = TilingConfig()
        config.subdivision.level = 4
        out = os.path.join(temp_dir, "pleasing.svg")

        summary = run_generation("pleasing", out, config=config, seed=11)

        assert summary.shape_counts == {"coarse": 32}
        assert summary.render.fine_paths == 0
        assert os.path.exists(out)

    def test_ramp_mode_run(self, temp_dir):
        config = TilingConfig()
        config.subdivision.level = 1
        config.render.mode = "ramp"
        out = os.path.join(temp_dir, "ramp.svg")

        summary = run_generation("penrose", out, config=config, seed=5)

        # kites and darts each get one path per flag value, in both layers
        assert summary.render.coarse_paths == 22
        assert summary.render.fine_paths == 22

    def test_angle_offset_changes_output(self, temp_dir):
        base = TilingConfig()
        base.subdivision.level = 0
        rotated = TilingConfig()
        rotated.subdivision.level = 0
        rotated.subdivision.angle = 3

        out1 = os.path.join(temp_dir, "a.svg")
        out2 = os.path.join(temp_dir, "b.svg")
        run_generation("regular", out1, config=base, seed=1)
        run_generation("regular", out2, config=rotated, seed=1)

        with open(out1, encoding="utf-8") as f1, open(out2, encoding="utf-8") as f2:
            assert f1.read() != f2.read()

    def test_kind_ramps_from_config(self, temp_dir):
        config = TilingConfig()
        config.subdivision.level = 1
        config.render.mode = "ramp"
        config.render.kind_ramps = {"kite": ["#0a0b0c"] * 11}
        out = os.path.join(temp_dir, "kinds.svg")

        run_generation("penrose", out, config=config, seed=8)

        with open(out, encoding="utf-8") as f:
            svg = f.read()
        styles = re.findall(r'<path [^>]*style="([^"]*)"', svg)
        # kites come first in each layer and use their own ramp
        assert styles[:11] == ["fill:rgb(10,11,12)"] * 11
        assert "fill:rgb(10,11,12)" not in styles[11:22]

    def test_rhombus_ramp_run(self, temp_dir):
        config = TilingConfig()
        config.subdivision.level = 2
        config.subdivision.rhombus = True
        config.render.mode = "ramp"
        out = os.path.join(temp_dir, "rhombus.svg")

        summary = run_generation("penrose", out, config=config, seed=2)

        assert summary.shape_counts == {"coarse": 50, "fine": 130}
        assert summary.render.coarse_paths == 22
        assert summary.render.fine_paths == 22
