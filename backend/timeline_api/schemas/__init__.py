"""Pydantic schemas module.

This module contains Pydantic models used for:
- API request/response validation
- Data transfer between the API and the timeline_ui client

Naming convention:
- Schema suffix to distinguish from SQLAlchemy models
"""

from timeline_api.models.enums import TimelineRecordType
from timeline_api.schemas.configuration import (
    ChildConfigurationCreateSchema,
    ChildConfigurationSchema,
    ChildConfigurationUpdateSchema,
    SavedConfigurationSchema,
)
from timeline_api.schemas.objects import (
    AvailableChildObjectSchema,
    ObjectTypeSchema,
    OptionSchema,
)
from timeline_api.schemas.fixtures import FixtureSchema
from timeline_api.schemas.report import HistoryReportPageSchema, HistoryReportRowSchema
from timeline_api.schemas.timeline import TimelineRowSchema

__all__ = [
    # Object metadata
    "ObjectTypeSchema",
    "OptionSchema",
    "AvailableChildObjectSchema",
    # Timeline
    "TimelineRecordType",
    "TimelineRowSchema",
    # Configuration
    "ChildConfigurationSchema",
    "ChildConfigurationCreateSchema",
    "ChildConfigurationUpdateSchema",
    "SavedConfigurationSchema",
    # Report
    "HistoryReportRowSchema",
    "HistoryReportPageSchema",
    # Seed data
    "FixtureSchema",
]
