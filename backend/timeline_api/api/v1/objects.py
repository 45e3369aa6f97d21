"""Object metadata endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.crud.objects import get_object_type
from timeline_api.models.base import get_async_session
from timeline_api.schemas.objects import ObjectTypeSchema

router = APIRouter()


@router.get("/{api_name}")
async def read_object_type(
    api_name: str,
    session: AsyncSession = Depends(get_async_session),
) -> ObjectTypeSchema:
    """Return the label and icon of an object type."""
    result = await get_object_type(session, api_name)
    if result is None:
        raise HTTPException(status_code=404, detail=f"Object type {api_name} not found")
    return result
