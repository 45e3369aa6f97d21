"""CRUD operations for the cross-object history report.

Lists field-history changes for every actively configured child object
type. Date bounds are inclusive at day granularity.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.crud.configuration import get_configured_objects
from timeline_api.crud.timeline import record_url
from timeline_api.models.history import FieldHistory
from timeline_api.models.object_type import ObjectType
from timeline_api.models.record import TrackedRecord
from timeline_api.schemas.report import HistoryReportPageSchema, HistoryReportRowSchema

logger = logging.getLogger(__name__)


def day_bounds(
    start_date: date | None, end_date: date | None
) -> tuple[datetime | None, datetime | None]:
    """Convert an inclusive day range into [start, end) datetimes."""
    start = datetime.combine(start_date, time.min) if start_date else None
    end = (
        datetime.combine(end_date + timedelta(days=1), time.min) if end_date else None
    )
    return start, end


async def _allowed_object_types(
    session: AsyncSession, object_api_names: list[str]
) -> list[str]:
    """Keep only the requested types that are actively configured."""
    if not object_api_names:
        return []
    configured = {o.value for o in await get_configured_objects(session)}
    return [name for name in dict.fromkeys(object_api_names) if name in configured]


def _apply_filters(
    stmt: Any,
    object_api_names: list[str],
    start_date: date | None,
    end_date: date | None,
) -> Any:
    start, end = day_bounds(start_date, end_date)
    stmt = stmt.where(TrackedRecord.object_api_name.in_(object_api_names))
    if start is not None:
        stmt = stmt.where(FieldHistory.changed_at >= start)
    if end is not None:
        stmt = stmt.where(FieldHistory.changed_at < end)
    return stmt


async def get_history_report(
    session: AsyncSession,
    object_api_names: list[str],
    start_date: date | None,
    end_date: date | None,
    limit: int,
    offset: int = 0,
) -> HistoryReportPageSchema:
    """Return one page of field changes, newest first.

    One extra row is fetched to decide has_more without a second query.
    """
    allowed = await _allowed_object_types(session, object_api_names)
    if not allowed:
        return HistoryReportPageSchema(records=[], has_more=False)

    stmt = (
        select(
            FieldHistory,
            TrackedRecord.name,
            TrackedRecord.object_api_name,
            ObjectType.label,
        )
        .join(TrackedRecord, TrackedRecord.record_id == FieldHistory.record_id)
        .outerjoin(ObjectType, ObjectType.api_name == TrackedRecord.object_api_name)
    )
    stmt = _apply_filters(stmt, allowed, start_date, end_date)
    stmt = (
        stmt.order_by(FieldHistory.changed_at.desc(), FieldHistory.history_id.desc())
        .limit(limit + 1)
        .offset(offset)
    )
    result = await session.execute(stmt)
    rows = result.all()

    has_more = len(rows) > limit
    records = [
        HistoryReportRowSchema(
            id=str(history.history_id),
            object_api_name=object_api_name,
            object_label=label or object_api_name,
            record_id=history.record_id,
            record_name=name,
            record_url=record_url(history.record_id),
            field_changed=history.field_label or history.field_name,
            old_value=history.old_value,
            new_value=history.new_value,
            changed_by=history.changed_by,
            changed_date=history.changed_at,
        )
        for history, name, object_api_name, label in rows[:limit]
    ]
    logger.debug(
        f"History report {allowed} {start_date}..{end_date}: "
        f"{len(records)} rows (offset={offset}, has_more={has_more})"
    )
    return HistoryReportPageSchema(records=records, has_more=has_more)


async def get_history_report_count(
    session: AsyncSession,
    object_api_names: list[str],
    start_date: date | None,
    end_date: date | None,
) -> int:
    """Return the number of field changes matching the report filters."""
    allowed = await _allowed_object_types(session, object_api_names)
    if not allowed:
        return 0
    stmt = select(func.count(FieldHistory.history_id)).join(
        TrackedRecord, TrackedRecord.record_id == FieldHistory.record_id
    )
    stmt = _apply_filters(stmt, allowed, start_date, end_date)
    result = await session.execute(stmt)
    return result.scalar_one()
