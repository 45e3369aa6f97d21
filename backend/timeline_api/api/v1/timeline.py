"""Timeline endpoints: merged history feed, counts, filters and permission."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.config import settings
from timeline_api.core.security import get_current_user, has_config_permission
from timeline_api.crud.timeline import (
    get_available_object_types,
    get_record,
    get_timeline_count,
    get_timeline_rows,
)
from timeline_api.models.base import get_async_session
from timeline_api.schemas.objects import OptionSchema
from timeline_api.schemas.timeline import TimelineRowSchema

router = APIRouter()


async def _require_record(
    session: AsyncSession, record_id: str, object_api_name: str
) -> None:
    record = await get_record(session, record_id)
    if record is None or record.object_api_name != object_api_name:
        raise HTTPException(
            status_code=404,
            detail=f"{object_api_name} record {record_id} not found",
        )


@router.get("/permission")
async def config_permission(request: Request) -> bool:
    """Whether the current user may edit timeline configurations."""
    return has_config_permission(get_current_user(request))


@router.get("/{record_id}")
async def read_timeline(
    record_id: str,
    object_api_name: str = Query(..., description="Object type of the record"),
    limit: int = Query(
        settings.default_page_size, ge=1, le=settings.max_page_size
    ),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_async_session),
) -> list[TimelineRowSchema]:
    """Return one page of the record's merged timeline, newest first."""
    await _require_record(session, record_id, object_api_name)
    return await get_timeline_rows(session, record_id, object_api_name, limit, offset)


@router.get("/{record_id}/count")
async def read_timeline_count(
    record_id: str,
    object_api_name: str = Query(..., description="Object type of the record"),
    session: AsyncSession = Depends(get_async_session),
) -> int:
    """Return the total number of rows on the record's timeline."""
    await _require_record(session, record_id, object_api_name)
    return await get_timeline_count(session, record_id, object_api_name)


@router.get("/{record_id}/object-types")
async def read_object_types(
    record_id: str,
    object_api_name: str = Query(..., description="Object type of the record"),
    session: AsyncSession = Depends(get_async_session),
) -> list[OptionSchema]:
    """Return the object types the timeline can be filtered by."""
    await _require_record(session, record_id, object_api_name)
    return await get_available_object_types(session, record_id, object_api_name)
