import re
from collections.abc import Iterable
from collections.abc import Sequence
from datetime import date
from datetime import timedelta
from typing import Literal

from contribution_graph.models import Activity


YearView = Literal["last"] | int

LAST_YEAR_WINDOW_DAYS = 365
_YEAR_PATTERN = re.compile(r"^\d{4}$")


def dedupe_and_sort(activities: Iterable[Activity]) -> list[Activity]:
    """Keep one activity per date, preferring the higher count, sorted by date."""

    by_date: dict[date, Activity] = {}
    for activity in activities:
        existing = by_date.get(activity.date)
        if existing is None or activity.count >= existing.count:
            by_date[activity.date] = activity

    return sorted(by_date.values(), key=lambda activity: activity.date)


def clamp_to_view(activities: Sequence[Activity], view: YearView) -> list[Activity]:
    """Restrict sorted activities to a single year or the trailing year.

    ``"last"`` keeps everything from 365 days before the latest activity up to
    and including it. An integer keeps that calendar year only.
    """

    if not activities:
        return []

    if view != "last":
        return [activity for activity in activities if activity.date.year == view]

    cutoff = activities[-1].date - timedelta(days=LAST_YEAR_WINDOW_DAYS)
    return [activity for activity in activities if activity.date >= cutoff]


def parse_year_view(value: str | None) -> YearView:
    """Parse a ``year`` query value into a view, defaulting to ``"last"``."""

    if not value or value == "last":
        return "last"
    if _YEAR_PATTERN.match(value):
        return int(value)
    return "last"


def available_years(activities: Iterable[Activity]) -> list[int]:
    return sorted({activity.date.year for activity in activities}, reverse=True)


def build_year_options(created_year: int, current_year: int) -> list[int]:
    """Return every year between account creation and now, newest first."""

    start = min(created_year, current_year)
    end = max(created_year, current_year)
    return list(range(end, start - 1, -1))
