"""Load seed data into the timeline tables."""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.models import (
    ChildConfiguration,
    FieldHistory,
    ObjectRelationship,
    ObjectType,
    RecordLookup,
    TrackedRecord,
)
from timeline_api.models.configuration import make_developer_name
from timeline_api.schemas.fixtures import FixtureSchema

logger = logging.getLogger(__name__)


@dataclass
class FixtureLoadResult:
    object_types: int = 0
    relationships: int = 0
    records: int = 0
    history: int = 0
    configurations: int = 0


async def load_fixture(session: AsyncSession, fixture: FixtureSchema) -> FixtureLoadResult:
    """Upsert a fixture into the database and commit.

    Object types, records and configurations are matched on their natural
    keys, so loading the same file twice leaves one copy of each. Field
    history rows have no natural key and are always appended.
    """
    result = FixtureLoadResult()

    for obj in fixture.object_types:
        await session.merge(ObjectType(**obj.model_dump()))
        result.object_types += 1
    await session.flush()

    for rel in fixture.relationships:
        existing = await session.scalar(
            select(ObjectRelationship).where(
                ObjectRelationship.child_object_api_name == rel.child,
                ObjectRelationship.field_name == rel.field,
            )
        )
        if existing is None:
            session.add(
                ObjectRelationship(
                    child_object_api_name=rel.child,
                    parent_object_api_name=rel.parent,
                    field_name=rel.field,
                )
            )
        else:
            existing.parent_object_api_name = rel.parent
        result.relationships += 1

    for rec in fixture.records:
        await session.merge(
            TrackedRecord(
                record_id=rec.record_id,
                object_api_name=rec.object_api_name,
                name=rec.name,
                created_at=rec.created_at,
                created_by=rec.created_by,
            )
        )
        result.records += 1
    await session.flush()

    for rec in fixture.records:
        for field_name, target in rec.lookups.items():
            lookup = await session.scalar(
                select(RecordLookup).where(
                    RecordLookup.record_id == rec.record_id,
                    RecordLookup.field_name == field_name,
                )
            )
            if lookup is None:
                session.add(
                    RecordLookup(
                        record_id=rec.record_id,
                        field_name=field_name,
                        target_record_id=target,
                    )
                )
            else:
                lookup.target_record_id = target

    for change in fixture.history:
        session.add(FieldHistory(**change.model_dump()))
        result.history += 1

    for config in fixture.configurations:
        developer_name = make_developer_name(
            config.parent_object_api_name, config.child_object_api_name
        )
        existing = await session.scalar(
            select(ChildConfiguration).where(
                ChildConfiguration.developer_name == developer_name
            )
        )
        if existing is None:
            session.add(
                ChildConfiguration(developer_name=developer_name, **config.model_dump())
            )
        else:
            for key, value in config.model_dump().items():
                setattr(existing, key, value)
        result.configurations += 1

    await session.commit()
    logger.info(
        f"Loaded fixture: {result.object_types} object types, "
        f"{result.records} records, {result.history} history rows, "
        f"{result.configurations} configurations"
    )
    return result
