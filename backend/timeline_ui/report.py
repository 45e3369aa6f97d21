"""History report: field changes across the configured object types.

The server is queried only by apply_filters() and load_more(). The Field
Changed and Changed By boxes filter the rows already loaded, as does the
column sort.
"""

import asyncio
import logging
from datetime import date
from typing import Any

from timeline_api.models.enums import DatePreset, SortDirection
from timeline_api.schemas.objects import OptionSchema
from timeline_api.schemas.report import HistoryReportPageSchema, HistoryReportRowSchema
from timeline_ui.client import RemoteCallError, TimelineApiClient, extract_error_message
from timeline_ui.filters import (
    DATE_PRESET_LABELS,
    date_preset_range,
    filter_by_substring,
    sort_rows,
    unique_sorted,
)
from timeline_ui.notifications import Notification, Notifier, Variant
from timeline_ui.state import RequestSequencer

logger = logging.getLogger(__name__)

PAGE_SIZE = 50
DEFAULT_SORT_FIELD = "changed_date"
REPORT_CHANNEL = "report"

FILTERED_EMPTY_MESSAGE = "No records match your current Field Changed or Changed By filter."
NO_RESULTS_MESSAGE = (
    "No history records found. Try adjusting your filters, date range, or object selection."
)


class HistoryReport:
    def __init__(
        self,
        api: TimelineApiClient,
        *,
        notifier: Notifier | None = None,
        page_size: int = PAGE_SIZE,
    ):
        self.api = api
        self.notifier = notifier
        self.page_size = page_size

        # Object picker
        self.configured_objects: list[OptionSchema] | None = None

        # Server filters
        self.selected_objects: list[str] = []
        self.start_date: date | None = None
        self.end_date: date | None = None
        self.active_preset: DatePreset | None = None

        # Client filters
        self.field_filter = ""
        self.changed_by_filter = ""

        self.is_filter_panel_open = True

        self.all_loaded: list[HistoryReportRowSchema] = []
        self.table_data: list[HistoryReportRowSchema] = []
        self.total_count: int | None = None
        self.has_more = False
        self.has_searched = False
        self.is_page_loading = False
        self.is_table_loading = False
        self.error_message = ""
        self.offset = 0

        self.sorted_by = DEFAULT_SORT_FIELD
        self.sorted_direction = SortDirection.DESC

        self._sequencer = RequestSequencer()

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def object_options(self) -> list[OptionSchema]:
        return list(self.configured_objects or [])

    @property
    def no_objects_configured(self) -> bool:
        return self.configured_objects is not None and not self.configured_objects

    @property
    def is_apply_disabled(self) -> bool:
        return not self.selected_objects or self.is_page_loading

    @property
    def show_table(self) -> bool:
        return self.has_searched and bool(self.table_data)

    @property
    def show_empty_state(self) -> bool:
        return self.has_searched and not self.table_data and not self.is_page_loading

    @property
    def empty_state_message(self) -> str:
        if self.all_loaded:
            return FILTERED_EMPTY_MESSAGE
        return NO_RESULTS_MESSAGE

    @property
    def is_client_filtered(self) -> bool:
        return bool(self.field_filter or self.changed_by_filter)

    @property
    def record_count_label(self) -> str:
        if self.total_count is None:
            return ""
        loaded = len(self.all_loaded)
        if self.is_client_filtered:
            return (
                f"Showing {len(self.table_data):,} filtered of {loaded:,} loaded "
                f"({self.total_count:,} total)"
            )
        return f"Showing {loaded:,} of {self.total_count:,} records"

    @property
    def has_error(self) -> bool:
        return bool(self.error_message)

    @property
    def filter_chevron_icon(self) -> str:
        return "utility:chevrondown" if self.is_filter_panel_open else "utility:chevronright"

    @property
    def preset_buttons(self) -> list[dict[str, Any]]:
        return [
            {
                "label": label,
                "value": preset.value,
                "variant": "brand" if preset == self.active_preset else "neutral",
            }
            for preset, label in DATE_PRESET_LABELS.items()
        ]

    @property
    def field_suggestions(self) -> list[str]:
        return unique_sorted(r.field_changed for r in self.all_loaded)

    @property
    def changed_by_suggestions(self) -> list[str]:
        return unique_sorted(r.changed_by for r in self.all_loaded)

    # -------------------------------------------------------------------------
    # Filter inputs
    # -------------------------------------------------------------------------

    async def load_objects(self) -> None:
        try:
            self.configured_objects = await self.api.get_configured_objects()
        except RemoteCallError as e:
            self.error_message = extract_error_message(e)
            logger.error(f"Error fetching configured objects: {self.error_message}")

    def toggle_filter_panel(self) -> None:
        self.is_filter_panel_open = not self.is_filter_panel_open

    def select_objects(self, values: list[str]) -> None:
        self.selected_objects = list(values)

    def set_start_date(self, value: date | None) -> None:
        self.start_date = value
        self.active_preset = None

    def set_end_date(self, value: date | None) -> None:
        self.end_date = value
        self.active_preset = None

    def apply_date_preset(self, preset: DatePreset | str, today: date | None = None) -> None:
        """Fill both dates from a preset; the end date is always today."""
        preset = DatePreset(preset)
        self.start_date, self.end_date = date_preset_range(preset, today or date.today())
        self.active_preset = preset

    def set_field_filter(self, text: str) -> None:
        self.field_filter = text or ""
        self._apply_client_filters()

    def set_changed_by_filter(self, text: str) -> None:
        self.changed_by_filter = text or ""
        self._apply_client_filters()

    def sort(self, field_name: str, direction: SortDirection | str) -> None:
        self.sorted_by = field_name
        self.sorted_direction = SortDirection(direction)
        self.table_data = sort_rows(self.table_data, field_name, self.sorted_direction)

    # -------------------------------------------------------------------------
    # Server queries
    # -------------------------------------------------------------------------

    async def apply_filters(self) -> None:
        """Start a fresh query: first page and total count, both or neither."""
        self.all_loaded = []
        self.table_data = []
        self.offset = 0
        self.has_more = False
        self.total_count = None
        self.has_searched = False
        self.error_message = ""
        self.is_table_loading = False
        self.is_page_loading = True

        ticket = self._sequencer.next(REPORT_CHANNEL)
        try:
            page, count = await asyncio.gather(
                self.api.get_history_report(
                    self.selected_objects,
                    self.start_date,
                    self.end_date,
                    self.page_size,
                    0,
                ),
                self.api.get_history_report_count(
                    self.selected_objects, self.start_date, self.end_date
                ),
            )
        except RemoteCallError as e:
            if self._sequencer.is_current(ticket, REPORT_CHANNEL):
                self.error_message = extract_error_message(e)
                self._notify("Error loading history", self.error_message)
                self.is_page_loading = False
            return

        if not self._sequencer.is_current(ticket, REPORT_CHANNEL):
            return
        self.all_loaded = list(page.records)
        self.offset = len(page.records)
        self.total_count = count
        self.has_more = self._more_available(page)
        self.has_searched = True
        self.is_page_loading = False
        self._apply_client_filters()

    async def load_more(self) -> None:
        """Append the next page. The offset only moves once the page arrives."""
        if not self.has_more or self.is_table_loading or self.is_page_loading:
            return

        self.is_table_loading = True
        ticket = self._sequencer.next(REPORT_CHANNEL)
        try:
            page = await self.api.get_history_report(
                self.selected_objects,
                self.start_date,
                self.end_date,
                self.page_size,
                self.offset,
            )
        except RemoteCallError as e:
            if self._sequencer.is_current(ticket, REPORT_CHANNEL):
                self._notify("Error loading more records", extract_error_message(e))
                self.is_table_loading = False
            return

        if not self._sequencer.is_current(ticket, REPORT_CHANNEL):
            return
        self.all_loaded = [*self.all_loaded, *page.records]
        self.offset += len(page.records)
        self.has_more = self._more_available(page)
        self.is_table_loading = False
        self._apply_client_filters()

    def _more_available(self, page: HistoryReportPageSchema) -> bool:
        return (
            page.has_more
            and len(page.records) >= self.page_size
            and len(self.all_loaded) < (self.total_count or 0)
        )

    def _apply_client_filters(self) -> None:
        rows = filter_by_substring(self.all_loaded, "field_changed", self.field_filter)
        rows = filter_by_substring(rows, "changed_by", self.changed_by_filter)
        self.table_data = sort_rows(rows, self.sorted_by, self.sorted_direction)

    def _notify(self, title: str, message: str) -> None:
        if self.notifier is not None:
            self.notifier.notify(Notification(title, message, Variant.ERROR))
