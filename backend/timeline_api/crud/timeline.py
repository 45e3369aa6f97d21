"""CRUD operations for the record timeline.

A timeline merges two sources into one chronological feed:

* the record's own field-history entries ("history" rows), and
* child records linked to it through each active child configuration
  ("related" rows).

Both sources are combined with UNION ALL so ordering, LIMIT/OFFSET and the
total count are all computed by the database.
"""

import logging
from typing import Any

from sqlalchemy import Select, String, Text, cast, func, literal, null, select, union_all
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.crud.objects import get_object_label
from timeline_api.models.configuration import ChildConfiguration
from timeline_api.models.enums import TimelineRecordType
from timeline_api.models.history import FieldHistory
from timeline_api.models.record import RecordLookup, TrackedRecord
from timeline_api.schemas.objects import OptionSchema
from timeline_api.schemas.timeline import TimelineRowSchema

logger = logging.getLogger(__name__)

HISTORY_ICON = "standard:record_update"


def record_url(record_id: str) -> str:
    """Navigation target for a record page."""
    return f"/records/{record_id}"


def history_title(field_label: str | None, field_name: str | None) -> str:
    """Headline for a field change, e.g. 'Stage changed'."""
    return f"{field_label or field_name or 'Field'} changed"


def history_description(old_value: str | None, new_value: str | None) -> str:
    """Second line for a field change."""
    if old_value and new_value:
        return f"Changed from {old_value} to {new_value}"
    if new_value:
        return f"Changed to {new_value}"
    if old_value:
        return f"Cleared {old_value}"
    return ""


async def get_record(session: AsyncSession, record_id: str) -> TrackedRecord | None:
    """Return a tracked record by id."""
    return await session.get(TrackedRecord, record_id)


async def get_active_configurations(
    session: AsyncSession, parent_object_api_name: str
) -> list[ChildConfiguration]:
    """Active child configurations for a parent type, in label order."""
    stmt = (
        select(ChildConfiguration)
        .where(
            ChildConfiguration.parent_object_api_name == parent_object_api_name,
            ChildConfiguration.is_active.is_(True),
        )
        .order_by(ChildConfiguration.child_object_label, ChildConfiguration.config_id)
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


def _history_select(record_id: str, object_api_name: str, object_label: str) -> Select:
    return select(
        literal(TimelineRecordType.HISTORY.value, String).label("record_type"),
        cast(FieldHistory.history_id, String).label("row_key"),
        FieldHistory.record_id.label("record_id"),
        literal(object_api_name, String).label("object_api_name"),
        literal(object_label, String).label("object_label"),
        FieldHistory.field_name.label("field_name"),
        FieldHistory.field_label.label("field_label"),
        FieldHistory.old_value.label("old_value"),
        FieldHistory.new_value.label("new_value"),
        cast(null(), String).label("record_name"),
        FieldHistory.changed_by.label("actor"),
        FieldHistory.changed_at.label("event_date"),
        literal(HISTORY_ICON, String).label("icon_name"),
    ).where(FieldHistory.record_id == record_id)


def _related_select(record_id: str, config: ChildConfiguration) -> Select:
    return (
        select(
            literal(TimelineRecordType.RELATED.value, String).label("record_type"),
            TrackedRecord.record_id.label("row_key"),
            TrackedRecord.record_id.label("record_id"),
            literal(config.child_object_api_name, String).label("object_api_name"),
            literal(config.child_object_label, String).label("object_label"),
            cast(null(), String).label("field_name"),
            cast(null(), String).label("field_label"),
            cast(null(), Text).label("old_value"),
            cast(null(), Text).label("new_value"),
            TrackedRecord.name.label("record_name"),
            TrackedRecord.created_by.label("actor"),
            TrackedRecord.created_at.label("event_date"),
            literal(config.icon_name, String).label("icon_name"),
        )
        .join(RecordLookup, RecordLookup.record_id == TrackedRecord.record_id)
        .where(
            TrackedRecord.object_api_name == config.child_object_api_name,
            RecordLookup.field_name == config.relationship_field,
            RecordLookup.target_record_id == record_id,
        )
    )


async def _timeline_subquery(
    session: AsyncSession, record_id: str, object_api_name: str
) -> Any:
    object_label = await get_object_label(session, object_api_name)
    configs = await get_active_configurations(session, object_api_name)
    selects = [_history_select(record_id, object_api_name, object_label)]
    selects.extend(_related_select(record_id, config) for config in configs)
    return union_all(*selects).subquery("timeline")


def _row_to_schema(row: Any) -> TimelineRowSchema:
    if row.record_type == TimelineRecordType.HISTORY.value:
        return TimelineRowSchema(
            id=f"h-{row.row_key}",
            record_id=row.record_id,
            object_api_name=row.object_api_name,
            object_label=row.object_label,
            title=history_title(row.field_label, row.field_name),
            description=history_description(row.old_value, row.new_value),
            event_date=row.event_date,
            icon_name=row.icon_name,
            record_type=TimelineRecordType.HISTORY,
            record_url=None,
            created_by_name=row.actor,
        )
    return TimelineRowSchema(
        id=row.row_key,
        record_id=row.record_id,
        object_api_name=row.object_api_name,
        object_label=row.object_label,
        title=row.record_name or "Untitled",
        description=f"Created by {row.actor}" if row.actor else None,
        event_date=row.event_date,
        icon_name=row.icon_name,
        record_type=TimelineRecordType.RELATED,
        record_url=record_url(row.record_id),
        created_by_name=row.actor,
    )


async def get_timeline_rows(
    session: AsyncSession,
    record_id: str,
    object_api_name: str,
    limit: int,
    offset: int = 0,
) -> list[TimelineRowSchema]:
    """Return one page of a record's merged timeline, newest first.

    Ties on event_date are broken by row type and row key so consecutive
    pages never overlap or skip rows.
    """
    timeline = await _timeline_subquery(session, record_id, object_api_name)
    stmt = (
        select(timeline)
        .order_by(
            timeline.c.event_date.desc(),
            timeline.c.record_type,
            timeline.c.row_key.desc(),
        )
        .limit(limit)
        .offset(offset)
    )
    result = await session.execute(stmt)
    rows = [_row_to_schema(row) for row in result.all()]
    logger.debug(
        f"Timeline {object_api_name} {record_id}: {len(rows)} rows "
        f"(limit={limit}, offset={offset})"
    )
    return rows


async def get_timeline_count(
    session: AsyncSession, record_id: str, object_api_name: str
) -> int:
    """Return the total number of rows on a record's timeline."""
    timeline = await _timeline_subquery(session, record_id, object_api_name)
    result = await session.execute(select(func.count()).select_from(timeline))
    return result.scalar_one()


async def get_available_object_types(
    session: AsyncSession, record_id: str, object_api_name: str
) -> list[OptionSchema]:
    """Object types that can appear on a record's timeline.

    The record's own type comes first, followed by each actively configured
    child type in label order.
    """
    options = [
        OptionSchema(
            label=await get_object_label(session, object_api_name),
            value=object_api_name,
        )
    ]
    seen = {object_api_name}
    for config in await get_active_configurations(session, object_api_name):
        if config.child_object_api_name in seen:
            continue
        seen.add(config.child_object_api_name)
        options.append(
            OptionSchema(
                label=config.child_object_label, value=config.child_object_api_name
            )
        )
    return options
