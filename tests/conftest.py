from collections.abc import Callable
from datetime import date
from datetime import timedelta

import pytest

from multicontrib.models import GRID_HEIGHT
from multicontrib.models import ActivitySeries
from multicontrib.models import ContributionGrid
from multicontrib.models import GridCell
from multicontrib.models import LanguageShare
from multicontrib.models import ProfileStats
from multicontrib.models import SourceActivity
from multicontrib.services.calendar_service import build_activity_series


RawDays = list[dict[str, object]]


@pytest.fixture
def raw_days() -> Callable[[str, list[int]], RawDays]:
    """Build consecutive GitHub-style day records starting at an ISO date."""

    def build(start: str, counts: list[int]) -> RawDays:
        first = date.fromisoformat(start)
        records: RawDays = []
        for offset, count in enumerate(counts):
            day = first + timedelta(days=offset)
            records.append(
                {"date": day.isoformat(), "weekday": (day.weekday() + 1) % 7, "count": count}
            )
        return records

    return build


@pytest.fixture
def series(raw_days) -> Callable[[str, str, list[int]], ActivitySeries]:
    def build(source: str, start: str, counts: list[int]) -> ActivitySeries:
        return build_activity_series(source, raw_days(start, counts))

    return build


@pytest.fixture
def grid_of() -> Callable[..., ContributionGrid]:
    """Grid with the given {(week, weekday): level} cells, counts equal to levels."""

    def build(levels: dict[tuple[int, int], int], width: int | None = None) -> ContributionGrid:
        cells = [
            GridCell(week=week, weekday=weekday, level=level, count=level)
            for (week, weekday), level in levels.items()
        ]
        grid_width = width or max((week for week, _ in levels), default=0) + 1
        return ContributionGrid(width=grid_width, height=GRID_HEIGHT, cells=cells)

    return build


@pytest.fixture
def source_activity(series) -> Callable[..., SourceActivity]:
    def build(
        name: str,
        counts: list[int],
        start: str = "2024-01-01",
        stats: ProfileStats | None = None,
        languages: list[LanguageShare] | None = None,
    ) -> SourceActivity:
        return SourceActivity(
            source=name,
            series=series(name, start, counts),
            stats=stats or ProfileStats(commits=10, total_contributions=sum(counts)),
            languages=languages or [LanguageShare(name="Python", color="#3572A5", size=100)],
        )

    return build
