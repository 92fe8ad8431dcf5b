import math

import pytest

from multicontrib.services.color import HSLColor
from multicontrib.services.color import parse_color
from multicontrib.services.isometric import BlockGeometry
from multicontrib.services.isometric import IsometricProjector
from multicontrib.services.isometric import block_color
from multicontrib.services.isometric import block_faces
from multicontrib.services.isometric import block_height
from multicontrib.services.isometric import draw_order
from multicontrib.services.isometric import render_blocks
from multicontrib.themes import PROFILE_THEMES


def test_origin_projects_to_offset_for_any_grid_size() -> None:
    for weeks in (1, 10, 53, 200):
        projector = IsometricProjector.fitted(
            offset_x=280,
            offset_y=130,
            extent_x=weeks * 10,
            extent_y=70,
            left=30,
            right=690,
            bottom=440,
        )

        origin = projector.project(0, 0, 0)

        assert (origin.x, origin.y) == (280, 130)


def test_projection_is_linear_oblique_transform() -> None:
    projector = IsometricProjector(offset_x=100, offset_y=50, scale=0.5)

    point = projector.project(20, 10, 7)

    assert point.x == pytest.approx(100 + 10 * math.cos(math.pi / 6) * 0.5)
    assert point.y == pytest.approx(50 + 30 * math.sin(math.pi / 6) * 0.5 - 7)


def test_projection_is_deterministic() -> None:
    first = IsometricProjector(offset_x=10, offset_y=20).project(33, 12, 4)
    second = IsometricProjector(offset_x=10, offset_y=20).project(33, 12, 4)

    assert first == second


def test_fitted_scale_never_exceeds_ceiling_and_shrinks_for_long_grids() -> None:
    short = IsometricProjector.fitted(280, 130, 100, 70, left=30, right=690, bottom=440)
    long = IsometricProjector.fitted(280, 130, 2000, 70, left=30, right=690, bottom=440)

    assert short.scale == pytest.approx(0.9)
    assert long.scale < short.scale
    far_corner = long.project(2000, 0, 0)
    assert far_corner.x <= 690 + 1e-6


def test_draw_order_is_back_to_front() -> None:
    order = draw_order(4, 7)

    sums = [week + day for week, day in order]
    assert len(order) == 28
    assert order[0] == (0, 0)
    assert order[-1] == (3, 6)
    assert sums == sorted(sums)


def test_block_height_scales_with_count() -> None:
    geometry = BlockGeometry()

    assert block_height(0, 10, geometry) == geometry.flat_height
    assert block_height(10, 10, geometry) == pytest.approx(42)
    assert block_height(5, 10, geometry) == pytest.approx(22)


def test_flat_block_has_only_top_face() -> None:
    projector = IsometricProjector(offset_x=0, offset_y=0)

    faces = block_faces(projector, 2, 3, 1.0, parse_color("#161b22"), BlockGeometry())

    assert [face.kind for face in faces] == ["top"]
    assert len(faces[0].points) == 4


def test_raised_block_has_shaded_front_and_right_faces() -> None:
    projector = IsometricProjector(offset_x=0, offset_y=0)
    base = HSLColor(hue=90, saturation=70, lightness=50)

    faces = block_faces(projector, 0, 0, 20.0, base, BlockGeometry())

    assert [face.kind for face in faces] == ["top", "front", "right"]
    assert faces[0].fill == "hsl(90, 70%, 50%)"
    assert faces[1].fill == "hsl(90, 70%, 40%)"
    assert faces[2].fill == "hsl(90, 70%, 32%)"


def test_top_face_is_raised_by_block_height() -> None:
    projector = IsometricProjector(offset_x=0, offset_y=0, scale=1)

    top, front, _ = block_faces(
        projector, 0, 0, 20.0, HSLColor(hue=0, saturation=50, lightness=50), BlockGeometry()
    )

    ground = projector.project(0, 10, 0)
    assert front.points[3] == ground
    assert top.points[3].y == pytest.approx(ground.y - 20)


def test_render_blocks_emits_one_block_per_address(grid_of) -> None:
    grid = grid_of({(0, 0): 2, (1, 3): 4}, width=2)
    projector = IsometricProjector(offset_x=0, offset_y=0)

    faces = render_blocks(grid, projector, lambda cell: parse_color("#40c463"))

    assert sum(1 for face in faces if face.kind == "top") == 14
    assert sum(1 for face in faces if face.kind == "front") == 2
    assert sum(1 for face in faces if face.kind == "right") == 2


def test_render_blocks_follows_draw_order(grid_of) -> None:
    grid = grid_of({}, width=3)
    projector = IsometricProjector(offset_x=100, offset_y=50, scale=0.5)

    faces = render_blocks(grid, projector, lambda cell: parse_color("#161b22"))

    tops = [face.points[0] for face in faces if face.kind == "top"]
    assert tops == [
        projector.project(week * 10, weekday * 10, 1.0) for week, weekday in draw_order(3, 7)
    ]


def test_rainbow_color_follows_week_position(grid_of) -> None:
    theme = PROFILE_THEMES["night-rainbow"]
    grid = grid_of({(0, 0): 4, (5, 0): 4}, width=10)
    first, later = grid.cells

    assert block_color(theme, first, 10, 4).hue == 0
    assert block_color(theme, later, 10, 4).hue == pytest.approx(150)
    assert block_color(theme, later, 10, 4).lightness == pytest.approx(60)


def test_palette_color_follows_level(grid_of) -> None:
    theme = PROFILE_THEMES["green"]
    grid = grid_of({(0, 0): 2})

    color = block_color(theme, grid.cells[0], 1, 2)

    assert color == parse_color(theme.palette[2])
    assert block_color(theme, None, 1, 2) == parse_color(theme.empty)
