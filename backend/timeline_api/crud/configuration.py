"""CRUD operations for timeline child configurations."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.crud.objects import relationship_exists
from timeline_api.models.configuration import ChildConfiguration, make_developer_name
from timeline_api.schemas.configuration import (
    ChildConfigurationCreateSchema,
    ChildConfigurationSchema,
)
from timeline_api.schemas.objects import OptionSchema

logger = logging.getLogger(__name__)


class DuplicateConfigurationError(ValueError):
    """An active configuration already exists for the parent/child pair."""


class RelationshipNotFoundError(ValueError):
    """The relationship field does not link the child type to the parent type."""


async def list_configurations(
    session: AsyncSession, parent_object_api_name: str
) -> list[ChildConfigurationSchema]:
    """Return every configuration (active or not) for a parent type."""
    stmt = (
        select(ChildConfiguration)
        .where(ChildConfiguration.parent_object_api_name == parent_object_api_name)
        .order_by(ChildConfiguration.child_object_label, ChildConfiguration.config_id)
    )
    result = await session.execute(stmt)
    return [ChildConfigurationSchema.model_validate(c) for c in result.scalars().all()]


async def save_configuration(
    session: AsyncSession, data: ChildConfigurationCreateSchema
) -> int:
    """Persist a new child configuration and return its id.

    A previously disabled configuration for the same pair is reactivated
    and overwritten rather than duplicated.

    Raises:
        RelationshipNotFoundError: relationship_field is not a lookup from
            the child type to the parent type.
        DuplicateConfigurationError: the pair is already actively configured.
    """
    if not await relationship_exists(
        session,
        data.parent_object_api_name,
        data.child_object_api_name,
        data.relationship_field,
    ):
        raise RelationshipNotFoundError(
            f"No relationship found between {data.parent_object_api_name} and "
            f"{data.child_object_api_name} via {data.relationship_field}."
        )

    developer_name = make_developer_name(
        data.parent_object_api_name, data.child_object_api_name
    )
    result = await session.execute(
        select(ChildConfiguration).where(
            ChildConfiguration.developer_name == developer_name
        )
    )
    config = result.scalar_one_or_none()

    if config is not None and config.is_active:
        raise DuplicateConfigurationError(
            f"{data.child_object_label} is already on the "
            f"{data.parent_object_api_name} timeline."
        )

    if config is None:
        config = ChildConfiguration(developer_name=developer_name)
        session.add(config)

    for key, value in data.model_dump().items():
        setattr(config, key, value)

    await session.commit()
    logger.info(
        f"Saved timeline configuration {developer_name} "
        f"(id={config.config_id}, field={config.relationship_field})"
    )
    return config.config_id


async def set_configuration_active(
    session: AsyncSession, config_id: int, is_active: bool
) -> ChildConfigurationSchema | None:
    """Enable or disable a configuration without deleting it."""
    config = await session.get(ChildConfiguration, config_id)
    if config is None:
        return None
    if is_active and not config.is_active:
        result = await session.execute(
            select(ChildConfiguration.config_id).where(
                ChildConfiguration.parent_object_api_name
                == config.parent_object_api_name,
                ChildConfiguration.child_object_api_name
                == config.child_object_api_name,
                ChildConfiguration.is_active.is_(True),
                ChildConfiguration.config_id != config_id,
            )
        )
        if result.first() is not None:
            raise DuplicateConfigurationError(
                f"{config.child_object_label} is already on the "
                f"{config.parent_object_api_name} timeline."
            )
    config.is_active = is_active
    await session.commit()
    logger.info(f"Configuration {config.developer_name} is_active={is_active}")
    return ChildConfigurationSchema.model_validate(config)


async def delete_configuration(session: AsyncSession, config_id: int) -> bool:
    """Delete a configuration by id. Returns False if it does not exist."""
    config = await session.get(ChildConfiguration, config_id)
    if config is None:
        return False
    await session.delete(config)
    await session.commit()
    logger.info(f"Deleted timeline configuration {config.developer_name}")
    return True


async def get_configured_objects(session: AsyncSession) -> list[OptionSchema]:
    """Distinct child object types of all active configurations, by label."""
    stmt = (
        select(
            ChildConfiguration.child_object_api_name,
            ChildConfiguration.child_object_label,
        )
        .where(ChildConfiguration.is_active.is_(True))
        .order_by(
            ChildConfiguration.child_object_label,
            ChildConfiguration.child_object_api_name,
        )
    )
    result = await session.execute(stmt)
    options: list[OptionSchema] = []
    seen: set[str] = set()
    for api_name, label in result.all():
        if api_name in seen:
            continue
        seen.add(api_name)
        options.append(OptionSchema(label=label, value=api_name))
    return options
