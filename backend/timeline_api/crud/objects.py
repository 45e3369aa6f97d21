"""CRUD operations for object metadata and relationship detection."""

from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.models.object_type import ObjectRelationship, ObjectType
from timeline_api.schemas.objects import AvailableChildObjectSchema, ObjectTypeSchema


def pick_relationship_field(
    parent_object_api_name: str, field_names: list[str]
) -> str | None:
    """Choose the lookup field that links a child type to its parent.

    A child can carry several lookups to the same parent (e.g. AccountId and
    Billing_Account__c). The conventionally named one wins; otherwise the
    alphabetically first is used so the choice is deterministic.
    """
    if not field_names:
        return None
    preferred = {
        f"{parent_object_api_name}Id".lower(),
        f"{parent_object_api_name}__c".lower(),
    }
    for name in sorted(field_names):
        if name.lower() in preferred:
            return name
    return sorted(field_names)[0]


async def get_object_type(
    session: AsyncSession, api_name: str
) -> ObjectTypeSchema | None:
    """Return metadata for one object type."""
    obj = await session.get(ObjectType, api_name)
    if obj is None:
        return None
    return ObjectTypeSchema.model_validate(obj)


async def get_object_label(session: AsyncSession, api_name: str) -> str:
    """Return the display label of an object type, or the api name if unknown."""
    obj = await session.get(ObjectType, api_name)
    return obj.label if obj is not None else api_name


async def get_available_child_objects(
    session: AsyncSession, parent_object_api_name: str
) -> list[AvailableChildObjectSchema]:
    """List every object type that could be added to a parent's timeline.

    Types without a lookup to the parent are still listed, with
    relationship_field set to None, so the caller can explain why they
    cannot be added.
    """
    types_result = await session.execute(
        select(ObjectType)
        .where(ObjectType.api_name != parent_object_api_name)
        .order_by(ObjectType.label, ObjectType.api_name)
    )
    object_types = types_result.scalars().all()

    rel_result = await session.execute(
        select(ObjectRelationship).where(
            ObjectRelationship.parent_object_api_name == parent_object_api_name
        )
    )
    fields_by_child: dict[str, list[str]] = defaultdict(list)
    for rel in rel_result.scalars().all():
        fields_by_child[rel.child_object_api_name].append(rel.field_name)

    return [
        AvailableChildObjectSchema(
            label=obj.label,
            value=obj.api_name,
            relationship_field=pick_relationship_field(
                parent_object_api_name, fields_by_child.get(obj.api_name, [])
            ),
        )
        for obj in object_types
    ]


async def relationship_exists(
    session: AsyncSession,
    parent_object_api_name: str,
    child_object_api_name: str,
    field_name: str,
) -> bool:
    """Check that field_name on the child type is a lookup to the parent type."""
    stmt = select(ObjectRelationship.relationship_id).where(
        ObjectRelationship.parent_object_api_name == parent_object_api_name,
        ObjectRelationship.child_object_api_name == child_object_api_name,
        ObjectRelationship.field_name == field_name,
    )
    result = await session.execute(stmt)
    return result.first() is not None
