from typing import Literal

from pydantic import BaseModel
from pydantic import Field

from contribution_graph.models import Activity
from contribution_graph.models import CalendarLabels
from contribution_graph.models import CalendarLayout
from contribution_graph.models import LayoutOptions


class CalendarLayoutRequest(BaseModel):
    """Activity snapshot and rendering parameters for one calendar."""

    activities: list[Activity]
    view: Literal["last"] | int | None = None
    options: LayoutOptions | None = None
    labels: CalendarLabels = Field(default_factory=CalendarLabels)
    total_count: int | None = Field(default=None, ge=0)


class CalendarLayoutResponse(BaseModel):
    """Calendar layout response payload."""

    is_empty: bool
    available_years: list[int]
    layout: CalendarLayout


class YearOptionsResponse(BaseModel):
    years: list[int]
