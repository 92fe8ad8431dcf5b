import re

import pytest

from multicontrib.models import LanguageShare
from multicontrib.models import ProfileStats
from multicontrib.services.calendar_service import derive_grid
from multicontrib.services.calendar_service import merge_calendars
from multicontrib.services.path_planner import plan_path
from multicontrib.services.profile_service import radar_values
from multicontrib.services.profile_service import render_profile_svg
from multicontrib.services.snake_service import animation_duration_ms
from multicontrib.services.snake_service import parse_output_spec
from multicontrib.services.snake_service import render_snake_svg
from multicontrib.services.trophy_service import format_value
from multicontrib.services.trophy_service import rank_colors
from multicontrib.services.trophy_service import render_trophies_svg
from multicontrib.services.trophy_service import trophy_rank
from multicontrib.themes import TROPHY_THEMES


STANDARD = (1, 10, 50, 100, 200, 500, 1000, 2000)


def test_parse_output_spec_reads_palette_query() -> None:
    assert parse_output_spec("dist/github-snake-dark.svg?palette=github-dark") == (
        "dist/github-snake-dark.svg",
        "github-dark",
    )
    assert parse_output_spec(" dist/github-snake.svg ") == ("dist/github-snake.svg", "github")


def test_animation_duration_is_steps_times_frame() -> None:
    assert animation_duration_ms(10, 15) == 150
    assert animation_duration_ms(0, 15) == 0


def test_snake_svg_animates_eaten_cells_and_snake(grid_of) -> None:
    grid = grid_of({(0, 0): 3, (2, 0): 1})
    path = plan_path(grid)

    svg = render_snake_svg(grid, path, palette="github")

    assert svg.startswith("<svg")
    assert svg.count('attributeName="fill"') == 2
    assert svg.count('attributeName="x"') == 4
    assert svg.count('attributeName="y"') == 4
    assert 'dur="75ms"' in svg
    assert "#0d1117" not in svg


def test_snake_svg_size_follows_grid(grid_of) -> None:
    grid = grid_of({(9, 6): 2}, width=10)

    svg = render_snake_svg(grid, plan_path(grid))

    assert 'width="157"' in svg
    assert 'height="115"' in svg
    assert svg.count("<rect") == 10 * 7 + 4


def test_dark_palette_adds_background(grid_of) -> None:
    grid = grid_of({(1, 1): 4})

    svg = render_snake_svg(grid, plan_path(grid), palette="github-dark")

    assert 'fill="#0d1117"' in svg
    assert "#39d353" in svg


def test_unknown_palette_falls_back_to_default(grid_of) -> None:
    grid = grid_of({(0, 1): 4})

    svg = render_snake_svg(grid, plan_path(grid), palette="no-such-palette")

    assert "#216e39" in svg


def test_profile_svg_contains_map_overlays_and_totals(series) -> None:
    grid = derive_grid(
        merge_calendars([series("alice", "2024-01-01", [0, 1, 4, 9, 12, 0, 3] * 2)])
    )
    stats = ProfileStats(
        commits=1234, issues=5, pull_requests=7, reviews=2, repos=3,
        total_contributions=4321, total_stars=56, total_forks=7,
    )
    languages = [
        LanguageShare(name="Python", color="#3572A5", size=700),
        LanguageShare(name="Rust", color=None, size=300),
    ]

    svg = render_profile_svg(grid, stats, languages)

    assert svg.startswith("<svg")
    assert "2024-01-01 / 2024-01-14" in svg
    assert "4,321" in svg
    assert "Python" in svg and "Rust" in svg
    assert "#666" in svg
    assert "Mon" in svg and "Wed" in svg and "Fri" in svg
    assert "hsl(" in svg
    assert svg.count("<polygon") > grid.width * 7


def test_profile_svg_single_language_draws_full_disc(series) -> None:
    grid = derive_grid(merge_calendars([series("alice", "2024-01-01", [1] * 7)]))

    svg = render_profile_svg(
        grid, ProfileStats(), [LanguageShare(name="Go", color="#00ADD8", size=10)]
    )

    assert 'fill="#00ADD8"' in svg
    assert re.search(r'<circle[^>]*fill="#00ADD8"', svg)


def test_profile_svg_handles_empty_grid() -> None:
    svg = render_profile_svg(derive_grid([]), ProfileStats(), [])

    assert svg.startswith("<svg")
    assert " / " not in svg


def test_radar_values_are_capped() -> None:
    stats = ProfileStats(commits=5000, issues=50, pull_requests=0, reviews=100, repos=10)

    assert radar_values(stats) == [1.0, 0.5, 0.0, 1.0, 0.2]


@pytest.mark.parametrize(
    ("value", "rank"),
    [(0, "C"), (1, "C"), (10, "B"), (75, "A"), (100, "AA"), (200, "AAA"), (500, "S"), (1999, "SS"), (2000, "SSS")],
)
def test_trophy_rank_thresholds(value: int, rank: str) -> None:
    assert trophy_rank(value, STANDARD) == rank


def test_rank_colors_by_rank_family() -> None:
    theme = TROPHY_THEMES["darkhub"]

    assert rank_colors("SSS", theme) == ("#FFD700", "#000")
    assert rank_colors("AA", theme) == ("#C0C0C0", "#000")
    assert rank_colors("B", theme) == ("#CD7F32", "#FFF")
    assert rank_colors("C", theme) == ("#4A4A4A", "#FFF")


def test_format_value_abbreviates_large_numbers() -> None:
    assert format_value(999) == "999"
    assert format_value(1500) == "1.5k"
    assert format_value(2_500_000) == "2.5M"


def test_trophies_svg_layout_follows_columns() -> None:
    stats = ProfileStats(total_stars=120, commits=2500, followers=3, account_years=6)

    svg = render_trophies_svg(stats, theme_name="nord", column=4, margin_w=15, margin_h=15)

    assert 'width="485"' in svg
    assert 'height="235"' in svg
    assert svg.count("<circle") == 8
    assert "Experience" in svg
    assert "2.5k" in svg


def test_trophies_svg_frame_and_background_are_optional() -> None:
    framed = render_trophies_svg(ProfileStats(), column=8, no_frame=False, no_bg=False)
    bare = render_trophies_svg(ProfileStats(), column=8)

    assert 'fill="#24292f"' in framed
    assert 'fill="#24292f"' not in bare
    assert 'width="985"' in bare
