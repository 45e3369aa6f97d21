"""SQLAlchemy models for the record timeline service."""

from timeline_api.models.base import (
    Base,
    TimestampMixin,
    async_session_maker,
    create_all,
    get_async_session,
)
from timeline_api.models.configuration import ChildConfiguration, make_developer_name
from timeline_api.models.enums import DatePreset, SortDirection, TimelineRecordType
from timeline_api.models.history import FieldHistory
from timeline_api.models.object_type import ObjectRelationship, ObjectType
from timeline_api.models.record import RecordLookup, TrackedRecord

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "async_session_maker",
    "create_all",
    "get_async_session",
    # Enums
    "DatePreset",
    "SortDirection",
    "TimelineRecordType",
    # Object metadata
    "ObjectType",
    "ObjectRelationship",
    # Records
    "TrackedRecord",
    "RecordLookup",
    # History
    "FieldHistory",
    # Configuration
    "ChildConfiguration",
    "make_developer_name",
]
