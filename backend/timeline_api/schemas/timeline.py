"""Pydantic schemas for timeline rows."""

from datetime import datetime

from pydantic import BaseModel, computed_field

from timeline_api.models.enums import TimelineRecordType

DATE_DISPLAY_FORMAT = "%b %d, %Y %I:%M %p"


class TimelineRowSchema(BaseModel):
    """One entry on a record's timeline.

    History rows describe a field change on the record itself; related rows
    point at a child record and carry a URL for navigation.

    Attributes:
        id: Row identifier, unique within one timeline ("h-<n>" or the child record id).
        record_id: The record the row belongs to.
        object_api_name: Object type of that record (drives the type filters).
        object_label: Display label of the object type.
        title: Headline text.
        description: Optional second line.
        event_date: When the change happened or the child record was created.
        icon_name: Icon reference.
        record_type: history or related.
        record_url: Navigation target for related rows, None for history rows.
        created_by_name: User who made the change or created the record.
    """

    id: str
    record_id: str
    object_api_name: str
    object_label: str | None = None
    title: str | None = None
    description: str | None = None
    event_date: datetime
    icon_name: str | None = None
    record_type: TimelineRecordType
    record_url: str | None = None
    created_by_name: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def date_formatted(self) -> str:
        """Display form of event_date, e.g. 'Mar 04, 2025 09:30 AM'."""
        return self.event_date.strftime(DATE_DISPLAY_FORMAT)

