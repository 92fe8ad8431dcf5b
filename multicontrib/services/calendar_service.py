from datetime import date
from collections.abc import Mapping
from collections.abc import Sequence

from loguru import logger
from pydantic import ValidationError

from multicontrib.models import GRID_HEIGHT
from multicontrib.models import ActivityDay
from multicontrib.models import ActivitySeries
from multicontrib.models import ContributionGrid
from multicontrib.models import GridCell
from multicontrib.models import MergedDay


DEFAULT_LEVEL_THRESHOLDS: tuple[int, ...] = (2, 5, 9)


class MalformedActivityError(ValueError):
    """Raised when a source reports a day record that cannot be trusted."""

    def __init__(self, source: str, index: int, reason: str) -> None:
        super().__init__(f"source {source!r}, day #{index}: {reason}")
        self.source = source
        self.index = index
        self.reason = reason


def contribution_level(
    count: int, thresholds: Sequence[int] = DEFAULT_LEVEL_THRESHOLDS
) -> int:
    """Map a daily count to a heatmap level in range 0..len(thresholds)+1.

    Each threshold is the inclusive upper bound of its level, so the default
    `(2, 5, 9)` gives 0 -> 0, 1-2 -> 1, 3-5 -> 2, 6-9 -> 3 and 10+ -> 4.
    """

    if count <= 0:
        return 0
    for level, upper in enumerate(thresholds, start=1):
        if count <= upper:
            return level
    return len(thresholds) + 1


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "record"
    return f"{location}: {first.get('msg', 'invalid value')}"


def build_activity_series(
    source: str, raw_days: Sequence[Mapping[str, object]]
) -> ActivitySeries:
    """Validate one source's raw day records.

    Raises:
        MalformedActivityError: On the first record with a missing date,
            a missing, negative or non-integer count, or a non-integer or
            out-of-range weekday.
    """

    days: list[ActivityDay] = []
    for index, item in enumerate(raw_days):
        if item.get("date") in (None, ""):
            raise MalformedActivityError(source, index, "date is missing")
        if item.get("count") is None:
            raise MalformedActivityError(source, index, "count is missing")
        try:
            days.append(ActivityDay.model_validate(dict(item)))
        except ValidationError as exc:
            raise MalformedActivityError(
                source, index, _describe_validation_error(exc)
            ) from exc

    return ActivitySeries(source=source, days=days)


def merge_calendars(all_series: Sequence[ActivitySeries]) -> list[MergedDay]:
    """Combine every source's days into one date-sorted series.

    Counts of days reported by several sources are summed. The weekday of
    the first occurrence is kept; week placement is re-derived later from
    the merged order, so it does not need to agree across sources.
    """

    counts: dict[date, int] = {}
    weekdays: dict[date, int] = {}
    for series in all_series:
        for day in series.days:
            if day.date not in counts:
                counts[day.date] = 0
                weekdays[day.date] = day.weekday
            counts[day.date] += day.count

    merged = [
        MergedDay(date=day, weekday=weekdays[day], count=counts[day])
        for day in sorted(counts)
    ]
    logger.debug(
        f"Merged {len(all_series)} sources into {len(merged)} days "
        f"({sum(day.count for day in merged)} total)"
    )
    return merged


def derive_grid(
    days: Sequence[MergedDay],
    thresholds: Sequence[int] = DEFAULT_LEVEL_THRESHOLDS,
) -> ContributionGrid:
    """Lay a date-sorted merged series out on a week × weekday grid.

    A new week starts whenever the weekday does not increase from one day
    to the next, so columns follow the observed weekday sequence instead of
    any source's own week numbering. Levels are recomputed from the merged
    counts. An empty series yields a 1×1 grid holding one empty cell.
    """

    if not days:
        return ContributionGrid(
            width=1,
            height=1,
            cells=[GridCell(week=0, weekday=0, level=0, count=0)],
        )

    cells: list[GridCell] = []
    week = 0
    last_weekday = -1
    for day in days:
        if day.weekday <= last_weekday:
            week += 1
        cells.append(
            GridCell(
                week=week,
                weekday=day.weekday,
                level=contribution_level(day.count, thresholds),
                count=day.count,
                date=day.date,
            )
        )
        last_weekday = day.weekday

    return ContributionGrid(width=week + 1, height=GRID_HEIGHT, cells=cells)


def build_grid(
    all_series: Sequence[ActivitySeries],
    thresholds: Sequence[int] = DEFAULT_LEVEL_THRESHOLDS,
) -> ContributionGrid:
    """Merge every source and derive the shared grid in one step."""

    grid = derive_grid(merge_calendars(all_series), thresholds)
    logger.info(
        f"Grid: {grid.width} weeks x {grid.height} days, "
        f"{len(grid.active_cells())} active, {grid.total} contributions"
    )
    return grid


def build_weeks_payload(grid: ContributionGrid) -> list[dict[str, object]]:
    """Group grid cells into week buckets for the JSON calendar response."""

    grouped_weeks: dict[int, list[dict[str, object]]] = {}
    for cell in grid.cells:
        if cell.date is None:
            continue
        grouped_weeks.setdefault(cell.week, []).append(
            {
                "date": cell.date.isoformat(),
                "weekday": cell.weekday,
                "count": cell.count,
                "level": cell.level,
            }
        )

    weeks: list[dict[str, object]] = []
    for week in sorted(grouped_weeks):
        days = sorted(grouped_weeks[week], key=lambda day: int(day["weekday"]))
        weeks.append({"week": week, "week_start": days[0]["date"], "days": days})

    return weeks
