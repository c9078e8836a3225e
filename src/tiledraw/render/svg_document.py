"""
SVG drawing sink for Tile Draw.

Collects filled or stroked path commands, text labels and Bezier curves in
drawing order inside a single surface group, then persists the document.
"""

import svgwrite

from tiledraw.geometry import polygons_to_path
from tiledraw.io.save_artifacts import save_svg
from tiledraw.render.palette import BLACK


def fill_style(fill):
    """CSS fill declaration; None means no fill."""
    if fill is None:
        return "fill:none"
    style = f"fill:{fill.to_rgb()}"
    if fill.opacity < 1.0:
        style += f";fill-opacity:{fill.opacity}"
    return style


def stroke_style(stroke):
    """CSS stroke declarations; None means no stroke."""
    if stroke is None:
        return ""
    return (
        f"stroke:{stroke.color.to_rgb()};stroke-width:{stroke.width};"
        f"stroke-opacity:{stroke.color.opacity};stroke-linecap:butt;stroke-linejoin:round"
    )


class SvgDocument:
    """
    Square or rectangular SVG canvas with a solid background.

    Commands are appended to the "surface1" group in call order, so later
    commands paint over earlier ones.
    """

    def __init__(self, width, height, background=BLACK):
        self.width = width
        self.height = height
        self.background = background

        self.dwg = svgwrite.Drawing(size=(width, height), debug=False)
        self.dwg.viewbox(0, 0, width, height)
        self.dwg.add(self.dwg.rect(insert=(0, 0), size=("100%", "100%"), fill=background.to_rgb()))

        self.surface = self.dwg.g(id="surface1")
        self.dwg.add(self.surface)
        self.path_count = 0

    def add_path(self, polygons, fill=None, stroke=None):
        """
        Add one path made of many closed polygons.

        Args:
            polygons: Triangle/Quadrilateral values or a vertex array of
                shape (N, 3, 2) or (N, 4, 2)
            fill: Color, or None for an unfilled path
            stroke: Stroke, or None

        Returns:
            the svgwrite path element
        """
        style = ";".join(s for s in (fill_style(fill), stroke_style(stroke)) if s)
        path = self.dwg.path(d=polygons_to_path(polygons), style=style)
        self.surface.add(path)
        self.path_count += 1
        return path

    def add_text(self, text, position, fill=BLACK):
        """Add a small text label at a Point."""
        label = self.dwg.text(
            text,
            insert=(position.x, position.y),
            style=fill_style(fill),
            font_size="0.5em",
            dy=["0.25em"],
        )
        self.surface.add(label)
        return label

    def add_bezier(self, points, stroke):
        """Add an unfilled cubic Bezier through four control Points."""
        p0, p1, p2, p3 = points
        d = (
            f"M {p0.x:.2f} {p0.y:.2f} C {p1.x:.2f} {p1.y:.2f}, "
            f"{p2.x:.2f} {p2.y:.2f}, {p3.x:.2f} {p3.y:.2f}"
        )
        path = self.dwg.path(d=d, style=f"{stroke_style(stroke)};fill:none")
        self.surface.add(path)
        return path

    def tostring(self):
        return self.dwg.tostring()

    def save(self, path):
        """
        Write the document to path.

        Raises:
            OutputError: if the destination cannot be opened
        """
        save_svg(self.dwg, path)
