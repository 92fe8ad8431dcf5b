import math
from collections.abc import Sequence

import svgwrite
from loguru import logger

from multicontrib.models import ContributionGrid
from multicontrib.models import LanguageShare
from multicontrib.models import ProfileStats
from multicontrib.services.drawing import FONT_FAMILY
from multicontrib.services.drawing import new_drawing
from multicontrib.services.drawing import polygon_points
from multicontrib.services.isometric import BlockGeometry
from multicontrib.services.isometric import IsometricProjector
from multicontrib.services.isometric import block_color
from multicontrib.services.isometric import render_blocks
from multicontrib.themes import DEFAULT_PROFILE_THEME
from multicontrib.themes import PROFILE_THEMES
from multicontrib.themes import ProfileTheme


SVG_WIDTH = 850
SVG_HEIGHT = 500

MAP_X = 30
MAP_Y = 50
MAP_WIDTH = 500
MAP_TOP_MARGIN = 80

STATS_X = 550
STATS_Y = 50

RADAR_RADIUS = 70
RADAR_RINGS = 5
RADAR_LABELS = ("Commit", "Issue", "PullReq", "Review", "Repo")
RADAR_CAPS = (1000, 100, 100, 100, 50)
RADAR_MIN_VALUE = 0.1

PIE_RADIUS = 35
PIE_FALLBACK_COLOR = "#666"
WEEKDAY_LABELS = ("", "Mon", "", "Wed", "", "Fri", "")


def resolve_profile_theme(name: str) -> ProfileTheme:
    theme = PROFILE_THEMES.get(name)
    if theme is None:
        logger.warning(f"Unknown profile theme {name!r}, using {DEFAULT_PROFILE_THEME!r}")
        return PROFILE_THEMES[DEFAULT_PROFILE_THEME]
    return theme


def map_projector(grid: ContributionGrid, geometry: BlockGeometry) -> IsometricProjector:
    """Projector anchored at the map center, scaled down for long calendars."""

    return IsometricProjector.fitted(
        offset_x=MAP_X + MAP_WIDTH / 2,
        offset_y=MAP_Y + MAP_TOP_MARGIN,
        extent_x=grid.width * geometry.cell_width,
        extent_y=grid.height * geometry.cell_depth,
        left=MAP_X,
        right=STATS_X + 2 * RADAR_RADIUS,
        bottom=SVG_HEIGHT - 60,
    )


def radar_values(stats: ProfileStats) -> list[float]:
    """Stats normalised against their caps, each clamped to 1."""

    raw = (stats.commits, stats.issues, stats.pull_requests, stats.reviews, stats.repos)
    return [min(value / cap, 1.0) for value, cap in zip(raw, RADAR_CAPS)]


def _radar_angle(index: int) -> float:
    return index / len(RADAR_LABELS) * math.pi * 2 - math.pi / 2


def _add_map(drawing: svgwrite.Drawing, grid: ContributionGrid, theme: ProfileTheme) -> None:
    geometry = BlockGeometry()
    projector = map_projector(grid, geometry)
    max_count = grid.max_count

    faces = render_blocks(
        grid,
        projector,
        lambda cell: block_color(theme, cell, grid.width, max_count),
        geometry,
    )
    for face in faces:
        drawing.add(drawing.polygon(points=polygon_points(face.points), fill=face.fill))

    for weekday in range(1, 7, 2):
        anchor = projector.project(-15, weekday * geometry.cell_depth, 0)
        drawing.add(
            drawing.text(
                WEEKDAY_LABELS[weekday],
                insert=(round(anchor.x - 5, 2), round(anchor.y, 2)),
                fill=theme.text,
                font_size=9,
                text_anchor="end",
            )
        )


def _add_radar(drawing: svgwrite.Drawing, stats: ProfileStats, theme: ProfileTheme) -> None:
    center_x = STATS_X + 120
    center_y = STATS_Y + 100
    axes = len(RADAR_LABELS)

    for ring in range(RADAR_RINGS, 0, -1):
        radius = ring / RADAR_RINGS * RADAR_RADIUS
        ring_points = [
            (
                round(center_x + math.cos(_radar_angle(i)) * radius, 2),
                round(center_y + math.sin(_radar_angle(i)) * radius, 2),
            )
            for i in range(axes)
        ]
        drawing.add(
            drawing.polygon(points=ring_points, fill="none", stroke=theme.grid, stroke_width=1)
        )

    for i, label in enumerate(RADAR_LABELS):
        angle = _radar_angle(i)
        end = (
            round(center_x + math.cos(angle) * RADAR_RADIUS, 2),
            round(center_y + math.sin(angle) * RADAR_RADIUS, 2),
        )
        drawing.add(
            drawing.line(start=(center_x, center_y), end=end, stroke=theme.grid, stroke_width=1)
        )
        drawing.add(
            drawing.text(
                label,
                insert=(
                    round(center_x + math.cos(angle) * (RADAR_RADIUS + 20), 2),
                    round(center_y + math.sin(angle) * (RADAR_RADIUS + 20), 2),
                ),
                fill=theme.text,
                font_size=10,
                text_anchor="middle",
                dominant_baseline="middle",
            )
        )

    data_points = []
    for i, value in enumerate(radar_values(stats)):
        radius = max(value, RADAR_MIN_VALUE) * RADAR_RADIUS
        angle = _radar_angle(i)
        data_points.append(
            (
                round(center_x + math.cos(angle) * radius, 2),
                round(center_y + math.sin(angle) * radius, 2),
            )
        )
    drawing.add(
        drawing.polygon(
            points=data_points,
            fill="rgba(200, 200, 50, 0.3)",
            stroke="#c8c832",
            stroke_width=2,
        )
    )


def _add_languages(
    drawing: svgwrite.Drawing, languages: Sequence[LanguageShare], theme: ProfileTheme
) -> None:
    center_x = STATS_X + 50
    center_y = STATS_Y + 270
    total_size = sum(language.size for language in languages) or 1
    start_angle = -math.pi / 2

    for language in languages:
        color = language.color or PIE_FALLBACK_COLOR
        sweep = language.size / total_size * math.pi * 2
        if sweep >= math.pi * 2 - 1e-9:
            # A full turn has coincident arc end points; draw the disc instead.
            drawing.add(drawing.circle(center=(center_x, center_y), r=PIE_RADIUS, fill=color))
            break
        end_angle = start_angle + sweep
        x1 = round(center_x + math.cos(start_angle) * PIE_RADIUS, 2)
        y1 = round(center_y + math.sin(start_angle) * PIE_RADIUS, 2)
        x2 = round(center_x + math.cos(end_angle) * PIE_RADIUS, 2)
        y2 = round(center_y + math.sin(end_angle) * PIE_RADIUS, 2)
        large_arc = 1 if sweep > math.pi else 0
        drawing.add(
            drawing.path(
                d=(
                    f"M{center_x},{center_y} L{x1},{y1} "
                    f"A{PIE_RADIUS},{PIE_RADIUS} 0 {large_arc} 1 {x2},{y2} Z"
                ),
                fill=color,
            )
        )
        start_angle = end_angle

    drawing.add(
        drawing.circle(center=(center_x, center_y), r=PIE_RADIUS * 0.5, fill=theme.background)
    )

    legend_y = STATS_Y + 230
    for language in languages[:6]:
        drawing.add(
            drawing.rect(
                insert=(center_x + 50, legend_y - 6),
                size=(10, 10),
                fill=language.color or PIE_FALLBACK_COLOR,
            )
        )
        drawing.add(
            drawing.text(
                language.name,
                insert=(center_x + 65, legend_y),
                fill=theme.text,
                font_size=10,
            )
        )
        legend_y += 14


def _add_footer(drawing: svgwrite.Drawing, stats: ProfileStats, theme: ProfileTheme) -> None:
    footer_y = SVG_HEIGHT - 30
    middle = SVG_WIDTH / 2
    drawing.add(
        drawing.text(
            f"{stats.total_contributions:,}",
            insert=(middle - 150, footer_y),
            fill=theme.accent,
            font_family=FONT_FAMILY,
            font_size=16,
            font_weight="bold",
        )
    )
    drawing.add(
        drawing.text(
            "contributions", insert=(middle - 65, footer_y), fill=theme.text, font_size=12
        )
    )
    drawing.add(
        drawing.text(
            f"☆ {stats.total_stars:,}",
            insert=(middle + 50, footer_y),
            fill=theme.text,
            font_size=14,
        )
    )
    drawing.add(
        drawing.text(
            f"⑂ {stats.total_forks:,}",
            insert=(middle + 130, footer_y),
            fill=theme.text,
            font_size=14,
        )
    )


def render_profile_svg(
    grid: ContributionGrid,
    stats: ProfileStats,
    languages: Sequence[LanguageShare],
    theme_name: str = DEFAULT_PROFILE_THEME,
) -> str:
    """Isometric contribution map with radar, language and totals overlays."""

    theme = resolve_profile_theme(theme_name)
    drawing = new_drawing(SVG_WIDTH, SVG_HEIGHT)
    drawing.add(drawing.rect(insert=(0, 0), size=("100%", "100%"), fill=theme.background))

    date_range = grid.date_range()
    caption = f"{date_range[0]} / {date_range[1]}" if date_range else ""
    drawing.add(
        drawing.text(
            caption,
            insert=(SVG_WIDTH - 20, 25),
            fill=theme.text,
            font_family=FONT_FAMILY,
            font_size=11,
            text_anchor="end",
        )
    )

    _add_map(drawing, grid, theme)
    _add_radar(drawing, stats, theme)
    _add_languages(drawing, languages, theme)
    _add_footer(drawing, stats, theme)

    return drawing.tostring()
