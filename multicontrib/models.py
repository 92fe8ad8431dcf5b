import datetime
from typing import Any
from typing import Literal

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator


GRID_HEIGHT = 7


def sunday_weekday(day: datetime.date) -> int:
    """Return the weekday index with Sunday as 0 and Saturday as 6."""

    return (day.weekday() + 1) % 7


class ActivityDay(BaseModel):
    """One source's recorded count for one calendar date."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    weekday: int = Field(ge=0, le=6, strict=True)
    count: int = Field(ge=0, strict=True)

    @model_validator(mode="before")
    @classmethod
    def _default_weekday(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("weekday") is None and data.get("date"):
            raw_date = data["date"]
            parsed = raw_date if isinstance(raw_date, datetime.date) else datetime.date.fromisoformat(str(raw_date))
            data = {**data, "weekday": sunday_weekday(parsed)}
        return data


class ActivitySeries(BaseModel):
    """Validated day series reported by a single source."""

    model_config = ConfigDict(frozen=True)

    source: str
    days: list[ActivityDay]


class MergedDay(BaseModel):
    """Per-date count summed across every source that reported the date."""

    model_config = ConfigDict(frozen=True)

    date: datetime.date
    weekday: int = Field(ge=0, le=6)
    count: int = Field(ge=0)


class GridCell(BaseModel):
    """Calendar day placed at a (week, weekday) grid address."""

    model_config = ConfigDict(frozen=True)

    week: int = Field(ge=0)
    weekday: int = Field(ge=0, le=6)
    level: int = Field(ge=0)
    count: int = Field(ge=0)
    date: datetime.date | None = None


class ContributionGrid(BaseModel):
    """Rectangular week × weekday address space with its derived cells."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(ge=1)
    height: int = Field(ge=1)
    cells: list[GridCell]

    @model_validator(mode="after")
    def _cells_within_bounds(self) -> "ContributionGrid":
        for cell in self.cells:
            if cell.level > 0 and (cell.week >= self.width or cell.weekday >= self.height):
                raise ValueError(
                    f"active cell ({cell.week}, {cell.weekday}) lies outside "
                    f"{self.width}x{self.height} grid"
                )
        return self

    def active_cells(self) -> list[GridCell]:
        return [cell for cell in self.cells if cell.level > 0]

    def level_map(self) -> dict[tuple[int, int], int]:
        return {(cell.week, cell.weekday): cell.level for cell in self.active_cells()}

    def cell_map(self) -> dict[tuple[int, int], GridCell]:
        return {(cell.week, cell.weekday): cell for cell in self.cells}

    @property
    def total(self) -> int:
        return sum(cell.count for cell in self.cells)

    @property
    def max_count(self) -> int:
        return max((cell.count for cell in self.cells), default=0)

    def date_range(self) -> tuple[datetime.date, datetime.date] | None:
        dates = sorted(cell.date for cell in self.cells if cell.date is not None)
        if not dates:
            return None
        return dates[0], dates[-1]

    def flatten(self) -> list[MergedDay]:
        """Turn dated cells back into a date-sorted merged series."""

        days = [
            MergedDay(date=cell.date, weekday=cell.weekday, count=cell.count)
            for cell in self.cells
            if cell.date is not None
        ]
        return sorted(days, key=lambda day: day.date)


class PathStep(BaseModel):
    """Single unit move of the planned walk; `eat` steps land on an active cell."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    action: Literal["move", "eat"]
    level: int | None = None


class ProjectedPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class Face(BaseModel):
    """Shaded quadrilateral of one rendered grid block."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["top", "front", "right"]
    points: list[ProjectedPoint]
    fill: str


class LanguageShare(BaseModel):
    name: str
    color: str | None = None
    size: int = Field(default=0, ge=0)


class ProfileStats(BaseModel):
    """Account-level statistics used by the overlay charts and trophies."""

    commits: int = 0
    issues: int = 0
    pull_requests: int = 0
    reviews: int = 0
    repos: int = 0
    total_contributions: int = 0
    total_stars: int = 0
    total_forks: int = 0
    followers: int = 0
    owned_repos: int = 0
    account_years: int = 0


class SourceActivity(BaseModel):
    """Everything fetched for one account: calendar, stats and languages."""

    source: str
    series: ActivitySeries
    stats: ProfileStats = ProfileStats()
    languages: list[LanguageShare] = []


class MergedActivity(BaseModel):
    """Combined view of every fetched account, ready for rendering."""

    sources: list[str]
    grid: ContributionGrid
    stats: ProfileStats
    languages: list[LanguageShare]
