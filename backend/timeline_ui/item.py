"""Display adapter for a single timeline row."""

from dataclasses import dataclass
from typing import Any

from timeline_api.models.enums import TimelineRecordType
from timeline_api.schemas.timeline import TimelineRowSchema

DEFAULT_ICON = "standard:record"
ICON_CLASS = "slds-timeline__icon"
HISTORY_ICON_CLASS = "slds-timeline__icon_history"
ACTIVATION_KEYS = frozenset({"Enter", " "})


@dataclass(frozen=True)
class TimelineItemView:
    """Read-only view of one timeline row with display fallbacks applied."""

    row: TimelineRowSchema

    @property
    def record_id(self) -> str:
        return self.row.record_id

    @property
    def object_api_name(self) -> str:
        return self.row.object_api_name

    @property
    def object_label(self) -> str:
        return self.row.object_label or self.row.object_api_name

    @property
    def title(self) -> str:
        return self.row.title or "Untitled"

    @property
    def description(self) -> str:
        return self.row.description or ""

    @property
    def has_description(self) -> bool:
        return bool(self.row.description)

    @property
    def date_formatted(self) -> str:
        return self.row.date_formatted

    @property
    def icon_name(self) -> str:
        return self.row.icon_name or DEFAULT_ICON

    @property
    def record_url(self) -> str | None:
        return self.row.record_url

    @property
    def is_history_record(self) -> bool:
        return self.row.record_type == TimelineRecordType.HISTORY

    @property
    def is_navigable(self) -> bool:
        """History rows never navigate, even if a URL slipped through."""
        return bool(self.row.record_url) and not self.is_history_record

    @property
    def icon_container_class(self) -> str:
        if self.is_history_record:
            return f"{ICON_CLASS} {HISTORY_ICON_CLASS}"
        return ICON_CLASS

    @property
    def created_by_name(self) -> str:
        return self.row.created_by_name or ""

    @property
    def has_created_by(self) -> bool:
        return bool(self.row.created_by_name)

    def navigation_target(self) -> dict[str, Any] | None:
        """Where activating the title should go, or None if it should not."""
        if not self.is_navigable:
            return None
        return {"type": "record_page", "record_id": self.record_id, "action": "view"}

    def handle_key(self, key: str) -> dict[str, Any] | None:
        """Keyboard activation: Enter and Space behave like a click."""
        if key in ACTIVATION_KEYS:
            return self.navigation_target()
        return None
