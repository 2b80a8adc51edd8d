from datetime import date

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class Activity(BaseModel):
    """One calendar day's aggregated count and its classification level."""

    model_config = ConfigDict(frozen=True)

    date: date
    count: int = Field(ge=0)
    level: int


Week = list[Activity | None]


class MonthLabel(BaseModel):
    """Month label drawn above a week column."""

    model_config = ConfigDict(frozen=True)

    week_index: int
    label: str


class GridGeometry(BaseModel):
    """Pixel extents of the calendar grid and the per-slot coordinate formula.

    Units are whatever the caller used for block size, margin and label
    height. Inputs are expected to be non-negative.
    """

    model_config = ConfigDict(frozen=True)

    width: int | float
    height: int | float
    block_size: int | float
    block_margin: int | float
    label_height: int | float

    @property
    def pitch(self) -> int | float:
        return self.block_size + self.block_margin

    def label_x(self, week_index: int) -> int | float:
        """Return the x offset of a month label above ``week_index``."""

        return week_index * self.pitch

    def cell_position(
        self, week_index: int, day_index: int
    ) -> tuple[int | float, int | float]:
        """Return the top-left corner of slot ``day_index`` in ``week_index``."""

        return (
            week_index * self.pitch,
            self.label_height + day_index * self.pitch,
        )


DEFAULT_MONTH_LABELS = [
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
]

DEFAULT_WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

DEFAULT_TOTAL_COUNT_TEMPLATE = "{{count}} activities in {{year}}"

# Upper bound for max_level; legend levels are materialized per request.
MAX_LEVEL_LIMIT = 10


class LegendLabels(BaseModel):
    less: str = "Less"
    more: str = "More"


class CalendarLabels(BaseModel):
    """Pre-translated strings used around the calendar grid."""

    months: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MONTH_LABELS),
        min_length=12,
        max_length=12,
    )
    weekdays: list[str] = Field(
        default_factory=lambda: list(DEFAULT_WEEKDAY_LABELS),
        min_length=7,
        max_length=7,
    )
    total_count: str = DEFAULT_TOTAL_COUNT_TEMPLATE
    legend: LegendLabels = Field(default_factory=LegendLabels)


class LayoutOptions(BaseModel):
    """Layout parameters for a single calendar build."""

    week_start: int = Field(default=0, ge=0, le=6)
    max_level: int = Field(default=4, le=MAX_LEVEL_LIMIT)
    block_size: int | float = Field(default=12, ge=0)
    block_margin: int | float = Field(default=4, ge=0)
    font_size: int | float = Field(default=14, ge=0)


class CalendarCell(BaseModel):
    """A non-empty grid slot with its resolved coordinates."""

    activity: Activity
    week_index: int
    day_index: int
    x: int | float
    y: int | float


class PositionedMonthLabel(MonthLabel):
    x: int | float


class CalendarLayout(BaseModel):
    """Everything a renderer needs to draw one contribution calendar."""

    weeks: list[Week]
    cells: list[CalendarCell]
    month_labels: list[PositionedMonthLabel]
    geometry: GridGeometry
    week_start: int
    max_level: int
    label_height: int | float
    total_count: int
    year: int | None
    total_count_text: str | None
    legend_levels: list[int]
    labels: CalendarLabels

    @property
    def is_empty(self) -> bool:
        return not self.weeks
