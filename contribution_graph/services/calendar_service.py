import logging
from collections.abc import Iterable
from collections.abc import Sequence
from datetime import date
from datetime import timedelta

from contribution_graph.models import Activity
from contribution_graph.models import CalendarCell
from contribution_graph.models import CalendarLabels
from contribution_graph.models import CalendarLayout
from contribution_graph.models import DEFAULT_MONTH_LABELS
from contribution_graph.models import DEFAULT_TOTAL_COUNT_TEMPLATE
from contribution_graph.models import GridGeometry
from contribution_graph.models import LayoutOptions
from contribution_graph.models import MonthLabel
from contribution_graph.models import PositionedMonthLabel
from contribution_graph.models import Week


logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
MIN_LABEL_WEEKS = 3
LABEL_MARGIN = 8


class InvalidActivityLevelError(ValueError):
    """Raised when an activity level falls outside ``[0, max_level]``."""

    def __init__(self, day: date, level: int, max_level: int) -> None:
        self.date = day
        self.level = level
        self.max_level = max_level
        super().__init__(
            f"Activity level {level} for {day.isoformat()} is out of range. "
            f"It must be between 0 and {max_level}."
        )


class DateRangeTooLargeError(ValueError):
    """Raised when the activity range spans more days than allowed."""

    def __init__(self, days: int, max_days: int) -> None:
        self.days = days
        self.max_days = max_days
        super().__init__(
            f"Activity range spans {days} days, the limit is {max_days}"
        )


def js_weekday(day: date) -> int:
    """Return the weekday with Sunday as 0 and Saturday as 6."""

    return (day.weekday() + 1) % 7


def validate_activity_levels(
    activities: Iterable[Activity], max_level: int
) -> None:
    """Reject the first activity whose level lies outside ``[0, max_level]``.

    Raises:
        InvalidActivityLevelError: On the first offending activity.
    """

    for activity in activities:
        if activity.level < 0 or activity.level > max_level:
            raise InvalidActivityLevelError(activity.date, activity.level, max_level)


def range_length(activities: Sequence[Activity]) -> int:
    """Return the number of calendar days between the earliest and latest date."""

    if not activities:
        return 0
    days = [activity.date for activity in activities]
    return (max(days) - min(days)).days + 1


def normalize(activities: Sequence[Activity]) -> list[Activity]:
    """Fill gaps so every calendar day between first and last date is present.

    Days missing from the input are synthesized with zero count and level.
    When the input repeats a date, the later record wins.
    """

    if not activities:
        return []

    ordered = sorted(activities, key=lambda activity: activity.date)
    by_date = {activity.date: activity for activity in activities}

    first = ordered[0].date
    last = ordered[-1].date

    series: list[Activity] = []
    current = first
    while current <= last:
        existing = by_date.get(current)
        series.append(
            existing
            if existing is not None
            else Activity(date=current, count=0, level=0)
        )
        current += timedelta(days=1)

    return series


def group_by_weeks(activities: Sequence[Activity], week_start: int = 0) -> list[Week]:
    """Bucket activities into 7-slot week columns aligned to ``week_start``.

    ``week_start`` uses 0 for Sunday through 6 for Saturday. Leading slots
    before the first day and trailing slots after the last day are ``None``.
    """

    if not 0 <= week_start < DAYS_PER_WEEK:
        raise ValueError("week_start must be between 0 and 6")

    normalized = normalize(activities)
    if not normalized:
        return []

    pad_start = (js_weekday(normalized[0].date) - week_start) % DAYS_PER_WEEK
    padded: list[Activity | None] = [None] * pad_start + list(normalized)

    weeks: list[Week] = []
    for offset in range(0, len(padded), DAYS_PER_WEEK):
        week = padded[offset : offset + DAYS_PER_WEEK]
        week.extend([None] * (DAYS_PER_WEEK - len(week)))
        weeks.append(week)

    return weeks


def plan_month_labels(
    weeks: Sequence[Week], month_names: Sequence[str] = DEFAULT_MONTH_LABELS
) -> list[MonthLabel]:
    """Place a label above the first week of every month in the grid.

    Labels closer than ``MIN_LABEL_WEEKS`` columns to the next label (for the
    first one) or to the right edge (for the last one) are dropped.
    """

    if len(month_names) != 12:
        raise ValueError("month_names must contain exactly 12 entries")

    candidates: list[MonthLabel] = []
    for week_index, week in enumerate(weeks):
        first_activity = next((slot for slot in week if slot is not None), None)
        if first_activity is None:
            continue

        label = month_names[first_activity.date.month - 1]
        if not candidates or candidates[-1].label != label:
            candidates.append(MonthLabel(week_index=week_index, label=label))

    kept: list[MonthLabel] = []
    last_index = len(candidates) - 1
    for index, candidate in enumerate(candidates):
        if index == 0:
            if (
                len(candidates) > 1
                and candidates[1].week_index - candidate.week_index >= MIN_LABEL_WEEKS
            ):
                kept.append(candidate)
            continue

        if index == last_index:
            if len(weeks) - candidate.week_index >= MIN_LABEL_WEEKS:
                kept.append(candidate)
            continue

        kept.append(candidate)

    return kept


def compute_geometry(
    week_count: int,
    block_size: int | float,
    block_margin: int | float,
    label_height: int | float,
) -> GridGeometry:
    """Compute grid width and height for ``week_count`` columns.

    Sizes must be non-negative. Zero weeks yields a non-positive width; callers
    are expected to skip rendering in that case.
    """

    pitch = block_size + block_margin
    return GridGeometry(
        width=week_count * pitch - block_margin,
        height=label_height + DAYS_PER_WEEK * pitch - block_margin,
        block_size=block_size,
        block_margin=block_margin,
        label_height=label_height,
    )


def format_total_count(template: str | None, total: int, year: int) -> str:
    """Substitute ``{{count}}`` and ``{{year}}`` in a pre-translated template.

    An empty template falls back to the default English sentence.
    """

    template = template or DEFAULT_TOTAL_COUNT_TEMPLATE
    return template.replace("{{count}}", str(total)).replace("{{year}}", str(year))


def build_calendar_layout(
    activities: Sequence[Activity],
    options: LayoutOptions | None = None,
    labels: CalendarLabels | None = None,
    total_count: int | None = None,
    max_range_days: int | None = None,
) -> CalendarLayout:
    """Run the full pipeline and return a renderable calendar description.

    Raises:
        InvalidActivityLevelError: If any activity level is out of range.
        DateRangeTooLargeError: If the input spans more than ``max_range_days``.
    """

    options = options or LayoutOptions()
    labels = labels or CalendarLabels()
    max_level = max(1, options.max_level)

    validate_activity_levels(activities, max_level)

    days = range_length(activities)
    if max_range_days is not None and days > max_range_days:
        raise DateRangeTooLargeError(days, max_range_days)

    weeks = group_by_weeks(activities, options.week_start)
    label_height = options.font_size + LABEL_MARGIN
    geometry = compute_geometry(
        week_count=len(weeks),
        block_size=options.block_size,
        block_margin=options.block_margin,
        label_height=label_height,
    )

    cells: list[CalendarCell] = []
    for week_index, week in enumerate(weeks):
        for day_index, activity in enumerate(week):
            if activity is None:
                continue
            x, y = geometry.cell_position(week_index, day_index)
            cells.append(
                CalendarCell(
                    activity=activity,
                    week_index=week_index,
                    day_index=day_index,
                    x=x,
                    y=y,
                )
            )

    month_labels = [
        PositionedMonthLabel(
            week_index=month_label.week_index,
            label=month_label.label,
            x=geometry.label_x(month_label.week_index),
        )
        for month_label in plan_month_labels(weeks, labels.months)
    ]

    total = (
        total_count
        if total_count is not None
        else sum(activity.count for activity in activities)
    )
    year = min(activity.date for activity in activities).year if activities else None

    logger.debug(
        "Built calendar layout with %d weeks and %d month labels",
        len(weeks),
        len(month_labels),
    )

    return CalendarLayout(
        weeks=weeks,
        cells=cells,
        month_labels=month_labels,
        geometry=geometry,
        week_start=options.week_start,
        max_level=max_level,
        label_height=label_height,
        total_count=total,
        year=year,
        total_count_text=(
            format_total_count(labels.total_count, total, year)
            if year is not None
            else None
        ),
        legend_levels=list(range(max_level + 1)),
        labels=labels,
    )
