"""History report endpoints: configured objects, paged rows and counts."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.config import settings
from timeline_api.crud.configuration import get_configured_objects
from timeline_api.crud.report import get_history_report, get_history_report_count
from timeline_api.models.base import get_async_session
from timeline_api.schemas.objects import OptionSchema
from timeline_api.schemas.report import HistoryReportPageSchema

router = APIRouter()


def _check_range(start_date: date | None, end_date: date | None) -> None:
    if start_date and end_date and start_date > end_date:
        raise HTTPException(
            status_code=400, detail="start_date must be on or before end_date"
        )


@router.get("/objects")
async def read_configured_objects(
    session: AsyncSession = Depends(get_async_session),
) -> list[OptionSchema]:
    """Child object types available to the report."""
    return await get_configured_objects(session)


@router.get("/history")
async def read_history_report(
    object_api_names: list[str] | None = Query(None),
    start_date: date | None = Query(None, description="Inclusive, YYYY-MM-DD"),
    end_date: date | None = Query(None, description="Inclusive, YYYY-MM-DD"),
    limit: int = Query(
        settings.default_page_size, ge=1, le=settings.max_page_size
    ),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_async_session),
) -> HistoryReportPageSchema:
    """Return one page of field changes for the selected object types."""
    _check_range(start_date, end_date)
    return await get_history_report(
        session, object_api_names or [], start_date, end_date, limit, offset
    )


@router.get("/history/count")
async def read_history_report_count(
    object_api_names: list[str] | None = Query(None),
    start_date: date | None = Query(None, description="Inclusive, YYYY-MM-DD"),
    end_date: date | None = Query(None, description="Inclusive, YYYY-MM-DD"),
    session: AsyncSession = Depends(get_async_session),
) -> int:
    """Return the number of field changes matching the report filters."""
    _check_range(start_date, end_date)
    return await get_history_report_count(
        session, object_api_names or [], start_date, end_date
    )
