import logging
from datetime import date

from fastapi import APIRouter
from fastapi import HTTPException
from fastapi import Query

from contribution_graph.api.schemas.calendar import CalendarLayoutRequest
from contribution_graph.api.schemas.calendar import CalendarLayoutResponse
from contribution_graph.api.schemas.calendar import YearOptionsResponse
from contribution_graph.services.calendar_service import DateRangeTooLargeError
from contribution_graph.services.calendar_service import InvalidActivityLevelError
from contribution_graph.services.calendar_service import build_calendar_layout
from contribution_graph.services.view_service import available_years
from contribution_graph.services.view_service import build_year_options
from contribution_graph.services.view_service import clamp_to_view
from contribution_graph.services.view_service import dedupe_and_sort
from contribution_graph.settings import Settings


logger = logging.getLogger(__name__)

router = APIRouter()
settings = Settings()


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "Hello World"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.post("/calendar/layout")
def create_calendar_layout(payload: CalendarLayoutRequest) -> CalendarLayoutResponse:
    """Build a renderable contribution calendar from an activity snapshot."""

    activities = payload.activities
    years = available_years(activities)
    if payload.view is not None:
        activities = clamp_to_view(dedupe_and_sort(activities), payload.view)

    try:
        layout = build_calendar_layout(
            activities,
            options=payload.options or settings.default_layout_options(),
            labels=payload.labels,
            total_count=payload.total_count,
            max_range_days=settings.max_range_days,
        )
    except InvalidActivityLevelError as exc:
        logger.warning("Rejected activity level %s on %s", exc.level, exc.date)
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except DateRangeTooLargeError as exc:
        logger.warning("Rejected activity range of %s days", exc.days)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return CalendarLayoutResponse(
        is_empty=layout.is_empty,
        available_years=years,
        layout=layout,
    )


@router.get("/calendar/years")
def get_year_options(
    created: int = Query(ge=1970, le=9999),
    current: int | None = Query(default=None, ge=1970, le=9999),
) -> YearOptionsResponse:
    """Return selectable calendar years from account creation to now."""

    current_year = current if current is not None else date.today().year
    return YearOptionsResponse(years=build_year_options(created, current_year))
