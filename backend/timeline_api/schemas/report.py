"""Pydantic schemas for the cross-object history report."""

from datetime import datetime

from pydantic import BaseModel, Field


class HistoryReportRowSchema(BaseModel):
    """A single field-history change, flattened for tabular display."""

    id: str
    object_api_name: str
    object_label: str | None = None
    record_id: str
    record_name: str | None = None
    record_url: str
    field_changed: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    changed_by: str | None = None
    changed_date: datetime


class HistoryReportPageSchema(BaseModel):
    """One page of report rows.

    has_more is True when at least one further row exists past this page.
    """

    records: list[HistoryReportRowSchema] = Field(default_factory=list)
    has_more: bool = False
