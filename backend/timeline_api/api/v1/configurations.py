"""Child configuration endpoints used by the timeline config editor."""

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.core.security import require_config_permission
from timeline_api.crud.configuration import (
    DuplicateConfigurationError,
    RelationshipNotFoundError,
    delete_configuration,
    list_configurations,
    save_configuration,
    set_configuration_active,
)
from timeline_api.crud.objects import get_available_child_objects
from timeline_api.models.base import get_async_session
from timeline_api.schemas.configuration import (
    ChildConfigurationCreateSchema,
    ChildConfigurationSchema,
    ChildConfigurationUpdateSchema,
    SavedConfigurationSchema,
)
from timeline_api.schemas.objects import AvailableChildObjectSchema

router = APIRouter()


@router.get("/")
async def read_configurations(
    parent_object_api_name: str = Query(..., description="Parent object type"),
    session: AsyncSession = Depends(get_async_session),
) -> list[ChildConfigurationSchema]:
    """List every child configuration for a parent object type."""
    return await list_configurations(session, parent_object_api_name)


@router.get("/available-children")
async def read_available_children(
    parent_object_api_name: str = Query(..., description="Parent object type"),
    session: AsyncSession = Depends(get_async_session),
) -> list[AvailableChildObjectSchema]:
    """List candidate child objects with their detected relationship field."""
    return await get_available_child_objects(session, parent_object_api_name)


@router.post("/", status_code=201, dependencies=[Depends(require_config_permission)])
async def create_configuration(
    body: ChildConfigurationCreateSchema,
    session: AsyncSession = Depends(get_async_session),
) -> SavedConfigurationSchema:
    """Save a new child configuration and return its id."""
    try:
        config_id = await save_configuration(session, body)
    except RelationshipNotFoundError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except DuplicateConfigurationError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return SavedConfigurationSchema(id=config_id)


@router.patch("/{config_id}", dependencies=[Depends(require_config_permission)])
async def update_configuration(
    config_id: int,
    body: ChildConfigurationUpdateSchema,
    session: AsyncSession = Depends(get_async_session),
) -> ChildConfigurationSchema:
    """Enable or disable a configuration."""
    try:
        result = await set_configuration_active(session, config_id, body.is_active)
    except DuplicateConfigurationError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    if result is None:
        raise HTTPException(status_code=404, detail=f"Configuration {config_id} not found")
    return result


@router.delete(
    "/{config_id}", status_code=204, dependencies=[Depends(require_config_permission)]
)
async def remove_configuration(
    config_id: int,
    session: AsyncSession = Depends(get_async_session),
) -> Response:
    """Delete a configuration by id."""
    if not await delete_configuration(session, config_id):
        raise HTTPException(status_code=404, detail=f"Configuration {config_id} not found")
    return Response(status_code=204)
