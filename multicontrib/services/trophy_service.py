from collections.abc import Sequence

import svgwrite
from loguru import logger
from pydantic import BaseModel
from pydantic import ConfigDict

from multicontrib.models import ProfileStats
from multicontrib.services.drawing import FONT_FAMILY
from multicontrib.services.drawing import new_drawing
from multicontrib.themes import DEFAULT_TROPHY_THEME
from multicontrib.themes import TROPHY_THEMES
from multicontrib.themes import TrophyTheme


TROPHY_SIZE = 110
ICON_SIZE = 40
RANKS = ("C", "B", "A", "AA", "AAA", "S", "SS", "SSS")


class TrophyDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    stat: str
    thresholds: tuple[int, ...]


_STANDARD = (1, 10, 50, 100, 200, 500, 1000, 2000)

TROPHY_DEFS: tuple[TrophyDefinition, ...] = (
    TrophyDefinition(id="stars", title="Stars", stat="total_stars", thresholds=_STANDARD),
    TrophyDefinition(
        id="commits",
        title="Commits",
        stat="commits",
        thresholds=(1, 100, 500, 1000, 2000, 5000, 10000, 20000),
    ),
    TrophyDefinition(id="followers", title="Followers", stat="followers", thresholds=_STANDARD),
    TrophyDefinition(
        id="repos",
        title="Repositories",
        stat="owned_repos",
        thresholds=(1, 10, 30, 50, 80, 100, 150, 200),
    ),
    TrophyDefinition(id="prs", title="Pull Requests", stat="pull_requests", thresholds=_STANDARD),
    TrophyDefinition(id="issues", title="Issues", stat="issues", thresholds=_STANDARD),
    TrophyDefinition(id="reviews", title="Reviews", stat="reviews", thresholds=_STANDARD),
    TrophyDefinition(
        id="experience",
        title="Experience",
        stat="account_years",
        thresholds=(1, 2, 3, 5, 7, 10, 15, 20),
    ),
)


def trophy_rank(value: int, thresholds: Sequence[int]) -> str:
    """Highest rank whose threshold `value` reaches; `C` below the first one."""

    rank = 0
    for index, threshold in enumerate(thresholds):
        if value >= threshold:
            rank = index
    return RANKS[min(rank, len(RANKS) - 1)]


def rank_colors(rank: str, theme: TrophyTheme) -> tuple[str, str]:
    """Return (base, text) colors for a rank."""

    if rank.startswith("S"):
        return theme.s_base, theme.s_text
    if rank.startswith("A"):
        return theme.a_base, theme.a_text
    if rank == "B":
        return theme.b_base, theme.b_text
    return theme.def_base, theme.def_text


def format_value(value: int) -> str:
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1000:
        return f"{value / 1000:.1f}k"
    return str(value)


def resolve_trophy_theme(name: str) -> TrophyTheme:
    theme = TROPHY_THEMES.get(name)
    if theme is None:
        logger.warning(f"Unknown trophy theme {name!r}, using {DEFAULT_TROPHY_THEME!r}")
        return TROPHY_THEMES[DEFAULT_TROPHY_THEME]
    return theme


def _add_trophy(
    drawing: svgwrite.Drawing,
    trophy: TrophyDefinition,
    stats: ProfileStats,
    theme: TrophyTheme,
    x: float,
    y: float,
    no_frame: bool,
    no_bg: bool,
) -> None:
    value = getattr(stats, trophy.stat)
    rank = trophy_rank(value, trophy.thresholds)
    base, text = rank_colors(rank, theme)
    group = drawing.g(transform=f"translate({x}, {y})")

    if not no_bg:
        group.add(drawing.rect(size=(TROPHY_SIZE, TROPHY_SIZE), rx=6, fill=theme.bg))
    if not no_frame:
        group.add(
            drawing.rect(
                size=(TROPHY_SIZE, TROPHY_SIZE),
                rx=6,
                fill="none",
                stroke=theme.icon,
                stroke_width=1,
            )
        )

    center_x = TROPHY_SIZE / 2
    center_y = 35
    group.add(drawing.circle(center=(center_x, center_y), r=ICON_SIZE / 2, fill=base))
    group.add(
        drawing.text(
            rank,
            insert=(center_x, center_y + 5),
            fill=text,
            font_family=FONT_FAMILY,
            font_size={1: 18, 2: 14}.get(len(rank), 12),
            font_weight="bold",
            text_anchor="middle",
        )
    )
    group.add(
        drawing.text(
            trophy.title,
            insert=(center_x, TROPHY_SIZE - 28),
            fill=theme.title,
            font_family=FONT_FAMILY,
            font_size=11,
            font_weight="600",
            text_anchor="middle",
        )
    )
    group.add(
        drawing.text(
            format_value(value),
            insert=(center_x, TROPHY_SIZE - 12),
            fill=theme.text,
            font_family=FONT_FAMILY,
            font_size=10,
            text_anchor="middle",
        )
    )
    drawing.add(group)


def render_trophies_svg(
    stats: ProfileStats,
    theme_name: str = DEFAULT_TROPHY_THEME,
    column: int = 4,
    margin_w: int = 15,
    margin_h: int = 15,
    no_frame: bool = True,
    no_bg: bool = True,
) -> str:
    """Grid of ranked trophies, `column` per row."""

    theme = resolve_trophy_theme(theme_name)
    column = max(1, column)
    rows = -(-len(TROPHY_DEFS) // column)
    width = column * TROPHY_SIZE + (column - 1) * margin_w
    height = rows * TROPHY_SIZE + (rows - 1) * margin_h

    drawing = new_drawing(width, height)
    for index, trophy in enumerate(TROPHY_DEFS):
        x = index % column * (TROPHY_SIZE + margin_w)
        y = index // column * (TROPHY_SIZE + margin_h)
        _add_trophy(drawing, trophy, stats, theme, x, y, no_frame, no_bg)

    return drawing.tostring()
