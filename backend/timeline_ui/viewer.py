"""Timeline viewer: a record's merged history feed with type filters and paging."""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Any

from timeline_api.schemas.objects import OptionSchema
from timeline_api.schemas.timeline import TimelineRowSchema
from timeline_ui.client import RemoteCallError, TimelineApiClient, extract_error_message
from timeline_ui.filters import filter_by_object_types
from timeline_ui.item import TimelineItemView
from timeline_ui.state import LoadState, RequestSequencer

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECORDS = 50
PAGE_CHANNEL = "page"


@dataclass(frozen=True)
class ObjectTypeFilter:
    """A filter toggle for one object type."""

    label: str
    value: str
    selected: bool = True

    @property
    def variant(self) -> str:
        return "brand" if self.selected else "neutral"


def _parse_show_filters(value: Any) -> bool:
    return value is not False and value != "false"


class TimelineViewer:
    """View state of the record timeline.

    All remote data is fetched through the API client; filter toggles only
    recompute the visible rows from what is already loaded.
    """

    def __init__(
        self,
        api: TimelineApiClient,
        record_id: str,
        object_api_name: str,
        *,
        title: str = "",
        max_records: int = DEFAULT_MAX_RECORDS,
        show_filters: Any = True,
    ):
        self.api = api
        self.record_id = record_id
        self.object_api_name = object_api_name
        self.title = title
        self.max_records = max_records
        self.show_filters = _parse_show_filters(show_filters)

        self.state = LoadState.IDLE
        self.rows: list[TimelineRowSchema] = []
        self.object_types: list[ObjectTypeFilter] = []
        self.object_label = ""
        self.has_config_access = False
        self.show_config_modal = False
        self.total_record_count = 0
        self.offset = 0
        self.has_more = False
        self.error_message = ""

        self._sequencer = RequestSequencer()

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def selected_filters(self) -> list[str]:
        return [t.value for t in self.object_types if t.selected]

    @property
    def visible_rows(self) -> list[TimelineRowSchema]:
        return filter_by_object_types(self.rows, self.selected_filters)

    @property
    def items(self) -> list[TimelineItemView]:
        return [TimelineItemView(row) for row in self.visible_rows]

    @property
    def is_loading(self) -> bool:
        return self.state == LoadState.LOADING

    @property
    def has_error(self) -> bool:
        return self.state == LoadState.ERROR

    @property
    def is_ready(self) -> bool:
        return self.state == LoadState.READY

    @property
    def has_records(self) -> bool:
        return bool(self.visible_rows)

    @property
    def has_filters(self) -> bool:
        return self.show_filters and bool(self.object_types)

    @property
    def empty_message(self) -> str:
        if not self.selected_filters:
            return "No filters selected. Please select at least one object type to view."
        return "No timeline records found for this record."

    @property
    def header_title(self) -> str:
        title = self.title or (
            f"{self.object_label} History" if self.object_label else "History"
        )
        if self.total_record_count > 0:
            return f"{title} ({len(self.visible_rows)})"
        return title

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load(self) -> None:
        """Fetch label, permission, object types, count and the first page."""
        self.state = LoadState.LOADING
        self.error_message = ""
        ticket = self._sequencer.next(PAGE_CHANNEL)
        _, _, options, count, page = await asyncio.gather(
            self._load_object_label(),
            self._load_permission(),
            self._fetch_object_types(),
            self._fetch_count(),
            self._fetch_page(0),
        )
        if not self._sequencer.is_current(ticket, PAGE_CHANNEL):
            return
        self._apply_first_page(count, page)
        if options is not None:
            self.object_types = [
                ObjectTypeFilter(label=o.label, value=o.value) for o in options
            ]
        else:
            self._object_types_from_rows()

    async def refresh(self) -> None:
        """Re-issue the count and first-page fetches, starting over at offset 0.

        The offset only resets once the new first page arrives.

        Object types are reloaded too so a newly configured child type shows
        up; types that were already present keep their selection.
        """
        self.state = LoadState.LOADING
        self.error_message = ""
        previous = {t.value: t.selected for t in self.object_types}
        ticket = self._sequencer.next(PAGE_CHANNEL)
        options, count, page = await asyncio.gather(
            self._fetch_object_types(), self._fetch_count(), self._fetch_page(0)
        )
        if not self._sequencer.is_current(ticket, PAGE_CHANNEL):
            return
        if options is not None:
            self.object_types = [
                ObjectTypeFilter(o.label, o.value, selected=previous.get(o.value, True))
                for o in options
            ]
        self._apply_first_page(count, page)

    async def load_more(self) -> None:
        """Append the next page. Does nothing when there is nothing more to load."""
        if not self.has_more or self.state is not LoadState.READY:
            return
        self.state = LoadState.LOADING
        ticket = self._sequencer.next(PAGE_CHANNEL)
        page = await self._fetch_page(self.offset)
        if not self._sequencer.is_current(ticket, PAGE_CHANNEL):
            return
        if isinstance(page, RemoteCallError):
            self._fail(page)
            return
        if page:
            self.rows = [*self.rows, *page]
            self.offset += len(page)
            self.has_more = self._more_available(len(page))
        else:
            self.has_more = False
        self.state = LoadState.READY

    def _apply_first_page(
        self, count: int | None, page: list[TimelineRowSchema] | RemoteCallError
    ) -> None:
        if count is not None:
            self.total_record_count = count
        if isinstance(page, RemoteCallError):
            self.has_more = False
            self._fail(page)
            return
        self.rows = list(page)
        self.offset = len(page)
        self.has_more = self._more_available(len(page))
        self.state = LoadState.READY

    def _more_available(self, page_length: int) -> bool:
        return page_length >= self.max_records and self.offset < self.total_record_count

    def _fail(self, error: RemoteCallError) -> None:
        self.state = LoadState.ERROR
        self.error_message = extract_error_message(error)
        logger.error(
            f"Error fetching timeline for {self.object_api_name} {self.record_id}: "
            f"{self.error_message}"
        )

    async def _fetch_page(self, offset: int) -> list[TimelineRowSchema] | RemoteCallError:
        try:
            return await self.api.get_timeline_data(
                self.record_id, self.object_api_name, self.max_records, offset
            )
        except RemoteCallError as e:
            return e

    async def _fetch_count(self) -> int | None:
        try:
            return await self.api.get_timeline_record_count(
                self.record_id, self.object_api_name
            )
        except RemoteCallError as e:
            logger.error(f"Error fetching record count: {extract_error_message(e)}")
            return None

    async def _load_object_label(self) -> None:
        try:
            info = await self.api.get_object_info(self.object_api_name)
            self.object_label = info.label
        except RemoteCallError as e:
            logger.error(f"Error fetching object info: {extract_error_message(e)}")
            self.object_label = self.object_api_name

    async def _load_permission(self) -> None:
        try:
            self.has_config_access = await self.api.has_config_permission()
        except RemoteCallError as e:
            logger.error(f"Error checking config permission: {extract_error_message(e)}")

    async def _fetch_object_types(self) -> list[OptionSchema] | None:
        try:
            return await self.api.get_available_object_types(
                self.record_id, self.object_api_name
            )
        except RemoteCallError as e:
            logger.error(f"Error fetching object types: {extract_error_message(e)}")
            return None

    def _object_types_from_rows(self) -> None:
        """Fallback filters: one per object type present in the loaded rows."""
        seen: dict[str, str] = {}
        for row in self.rows:
            seen.setdefault(row.object_api_name, row.object_label or row.object_api_name)
        self.object_types = [
            ObjectTypeFilter(label=label, value=value) for value, label in seen.items()
        ]

    # -------------------------------------------------------------------------
    # Filters
    # -------------------------------------------------------------------------

    def toggle_filter(self, value: str) -> None:
        """Flip one object type on or off. Unknown values are ignored."""
        for index, option in enumerate(self.object_types):
            if option.value == value:
                self.object_types = [
                    *self.object_types[:index],
                    replace(option, selected=not option.selected),
                    *self.object_types[index + 1 :],
                ]
                return

    def select_all(self) -> None:
        self.object_types = [replace(t, selected=True) for t in self.object_types]

    def clear_all(self) -> None:
        self.object_types = [replace(t, selected=False) for t in self.object_types]

    # -------------------------------------------------------------------------
    # Config modal
    # -------------------------------------------------------------------------

    def open_config(self) -> bool:
        """Show the config editor if the user is allowed to configure."""
        if not self.has_config_access:
            return False
        self.show_config_modal = True
        return True

    def close_config(self) -> None:
        self.show_config_modal = False

    async def config_saved(self) -> None:
        """Configuration changed: close the editor and reload the feed."""
        self.show_config_modal = False
        await self.refresh()
