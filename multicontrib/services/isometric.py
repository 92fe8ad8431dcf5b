"""Oblique projection and back-to-front block faces for the contribution map.

Logical space: x runs along weeks, y along weekdays (both in cell units
times the cell size) and z is the block elevation. The projection is the
fixed 30° linear map

    drawX = (x - y) * cos(θ) * k + offset_x
    drawY = (x + y) * sin(θ) * k - z + offset_y

so (0, 0, 0) always lands on the offset and farther blocks (smaller
week + weekday) sit visually behind nearer ones.
"""

import math
from collections.abc import Callable

from pydantic import BaseModel
from pydantic import ConfigDict

from multicontrib.models import ContributionGrid
from multicontrib.models import Face
from multicontrib.models import GridCell
from multicontrib.models import ProjectedPoint
from multicontrib.services.color import Color
from multicontrib.services.color import HSLColor
from multicontrib.services.color import parse_color
from multicontrib.services.color import shade
from multicontrib.themes import ProfileTheme


ISO_ANGLE = math.pi / 6
DEFAULT_SCALE = 0.9


class IsometricProjector:
    """Stateless 30° oblique projector with fixed scale and origin offset."""

    def __init__(
        self,
        offset_x: float,
        offset_y: float,
        scale: float = DEFAULT_SCALE,
        angle: float = ISO_ANGLE,
    ) -> None:
        self.offset_x = offset_x
        self.offset_y = offset_y
        self.scale = scale
        self._cos = math.cos(angle)
        self._sin = math.sin(angle)

    @classmethod
    def fitted(
        cls,
        offset_x: float,
        offset_y: float,
        extent_x: float,
        extent_y: float,
        left: float,
        right: float,
        bottom: float,
        ceiling: float = DEFAULT_SCALE,
        angle: float = ISO_ANGLE,
    ) -> "IsometricProjector":
        """Largest scale up to `ceiling` keeping the ground plane inside the box.

        `extent_x`/`extent_y` are the logical sizes of the field; the origin
        stays on the given offset whatever the grid size.
        """

        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        candidates = [ceiling]
        if extent_x > 0:
            candidates.append((right - offset_x) / (extent_x * cos_a))
        if extent_y > 0:
            candidates.append((offset_x - left) / (extent_y * cos_a))
        if extent_x + extent_y > 0:
            candidates.append((bottom - offset_y) / ((extent_x + extent_y) * sin_a))
        scale = max(min(candidates), 0.01)
        return cls(offset_x, offset_y, scale=scale, angle=angle)

    def project(self, x: float, y: float, z: float = 0.0) -> ProjectedPoint:
        return ProjectedPoint(
            x=(x - y) * self._cos * self.scale + self.offset_x,
            y=(x + y) * self._sin * self.scale - z + self.offset_y,
        )


def draw_order(width: int, height: int) -> list[tuple[int, int]]:
    """Every (week, weekday) address sorted back to front by week + weekday."""

    addresses = [(week, day) for week in range(width) for day in range(height)]
    return sorted(addresses, key=lambda address: address[0] + address[1])


class BlockGeometry(BaseModel):
    """Logical block size, elevation scale and face shading deltas."""

    model_config = ConfigDict(frozen=True)

    cell_width: float = 10.0
    cell_depth: float = 10.0
    max_height: float = 40.0
    base_margin: float = 2.0
    flat_height: float = 1.0
    front_delta: float = -10.0
    right_delta: float = -18.0


def block_height(count: int, max_count: int, geometry: BlockGeometry) -> float:
    if count <= 0:
        return geometry.flat_height
    return count / max(max_count, 1) * geometry.max_height + geometry.base_margin


def block_color(
    theme: ProfileTheme, cell: GridCell | None, weeks: int, max_count: int
) -> Color:
    """Base color of a block: palette by level, or rainbow hue by week position."""

    if cell is None or cell.count <= 0:
        return parse_color(theme.empty)
    if theme.palette:
        return parse_color(theme.palette[min(cell.level, len(theme.palette) - 1)])
    hue = cell.week / max(weeks, 1) * theme.hue_range
    lightness = theme.min_lightness + cell.count / max(max_count, 1) * theme.lightness_span
    return HSLColor(hue=hue, saturation=theme.saturation, lightness=lightness)


def block_faces(
    projector: IsometricProjector,
    week: int,
    weekday: int,
    height: float,
    color: Color,
    geometry: BlockGeometry,
) -> list[Face]:
    """Top face, plus shaded front and right faces when the block is raised."""

    x = week * geometry.cell_width
    y = weekday * geometry.cell_depth
    x2 = x + geometry.cell_width
    y2 = y + geometry.cell_depth

    top_back_left = projector.project(x, y, height)
    top_back_right = projector.project(x2, y, height)
    top_front_left = projector.project(x, y2, height)
    top_front_right = projector.project(x2, y2, height)

    faces = [
        Face(
            kind="top",
            points=[top_back_left, top_back_right, top_front_right, top_front_left],
            fill=color.to_svg(),
        )
    ]
    if height <= geometry.flat_height:
        return faces

    bottom_front_left = projector.project(x, y2, 0)
    bottom_front_right = projector.project(x2, y2, 0)
    bottom_back_right = projector.project(x2, y, 0)
    faces.append(
        Face(
            kind="front",
            points=[top_front_left, top_front_right, bottom_front_right, bottom_front_left],
            fill=shade(color, geometry.front_delta).to_svg(),
        )
    )
    faces.append(
        Face(
            kind="right",
            points=[top_front_right, top_back_right, bottom_back_right, bottom_front_right],
            fill=shade(color, geometry.right_delta).to_svg(),
        )
    )
    return faces


def render_blocks(
    grid: ContributionGrid,
    projector: IsometricProjector,
    color_for: Callable[[GridCell | None], Color],
    geometry: BlockGeometry | None = None,
) -> list[Face]:
    """Faces for every grid address, in painter's order."""

    geometry = geometry or BlockGeometry()
    cells = grid.cell_map()
    max_count = grid.max_count

    faces: list[Face] = []
    for week, weekday in draw_order(grid.width, grid.height):
        cell = cells.get((week, weekday))
        count = cell.count if cell else 0
        height = block_height(count, max_count, geometry)
        faces.extend(
            block_faces(projector, week, weekday, height, color_for(cell), geometry)
        )
    return faces
