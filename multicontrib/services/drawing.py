from collections.abc import Iterable

import svgwrite

from multicontrib.models import ProjectedPoint


FONT_FAMILY = "Segoe UI, sans-serif"


def new_drawing(width: float, height: float) -> svgwrite.Drawing:
    """Blank drawing with matching size and viewBox.

    Validation is off because fills such as `hsl(...)` are outside
    svgwrite's color grammar.
    """

    drawing = svgwrite.Drawing(size=(width, height), debug=False)
    drawing.viewbox(0, 0, width, height)
    return drawing


def polygon_points(points: Iterable[ProjectedPoint]) -> list[tuple[float, float]]:
    return [(round(point.x, 2), round(point.y, 2)) for point in points]
