import datetime

from pydantic import BaseModel

from multicontrib.models import PathStep


class CalendarDay(BaseModel):
    """Single day item used in the calendar response."""

    date: datetime.date
    weekday: int
    count: int
    level: int


class CalendarWeek(BaseModel):
    """Derived week column containing ordered daily items."""

    week: int
    week_start: datetime.date
    days: list[CalendarDay]


class CalendarResponse(BaseModel):
    """Merged calendar of the requested users plus the planned walk."""

    users: list[str]
    total: int
    width: int
    height: int
    weeks: list[CalendarWeek]
    eat_steps: int
    path: list[PathStep]
