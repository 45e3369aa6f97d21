"""Pure list operations behind the timeline filters and the report table.

Nothing here performs I/O; every function returns a new list and leaves
its input untouched.
"""

from collections.abc import Callable, Iterable
from datetime import date, timedelta
from typing import Any, TypeVar

from timeline_api.models.enums import DatePreset, SortDirection

T = TypeVar("T")

# Days subtracted from today for the rolling presets; the range includes
# today, so "last 7 days" starts 6 days back.
ROLLING_PRESET_DAYS = {
    DatePreset.LAST_7_DAYS: 6,
    DatePreset.LAST_30_DAYS: 29,
    DatePreset.LAST_90_DAYS: 89,
}

DATE_PRESET_LABELS = {
    DatePreset.LAST_7_DAYS: "Last 7 Days",
    DatePreset.LAST_30_DAYS: "Last 30 Days",
    DatePreset.LAST_90_DAYS: "Last 90 Days",
    DatePreset.LAST_YEAR: "Last Year",
    DatePreset.YEAR_TO_DATE: "Year to Date",
}


def filter_by_object_types(rows: Iterable[T], selected: Iterable[str]) -> list[T]:
    """Keep rows whose object_api_name is selected. No selection means no rows."""
    wanted = set(selected)
    if not wanted:
        return []
    return [row for row in rows if getattr(row, "object_api_name", None) in wanted]


def contains_ci(value: str | None, query: str) -> bool:
    """Case-insensitive substring test; a missing value never matches."""
    return value is not None and query.lower() in value.lower()


def filter_by_substring(
    rows: Iterable[T], attribute: str, query: str | None
) -> list[T]:
    """Keep rows whose attribute contains query (case-insensitive).

    An empty query keeps every row.
    """
    if not query:
        return list(rows)
    return [row for row in rows if contains_ci(getattr(row, attribute, None), query)]


def _sort_key(value: Any) -> tuple[int, Any]:
    # None and strings share a rank so None sorts exactly like "".
    if value is None:
        return (0, "")
    if isinstance(value, str):
        return (0, value.lower())
    return (1, value)


def sort_rows(
    rows: Iterable[T],
    field_name: str,
    direction: SortDirection | str = SortDirection.ASC,
    key: Callable[[T, str], Any] | None = None,
) -> list[T]:
    """Stable sort on one field; None sorts as an empty string.

    Strings compare case-insensitively. Rows that compare equal keep their
    relative order in both directions.
    """
    getter = key or (lambda row, name: getattr(row, name, None))
    return sorted(
        rows,
        key=lambda row: _sort_key(getter(row, field_name)),
        reverse=SortDirection(direction) == SortDirection.DESC,
    )


def date_preset_range(preset: DatePreset | str, today: date) -> tuple[date, date]:
    """Return (start, end) for a report date preset; end is always today."""
    preset = DatePreset(preset)
    if preset in ROLLING_PRESET_DAYS:
        return today - timedelta(days=ROLLING_PRESET_DAYS[preset]), today
    if preset == DatePreset.YEAR_TO_DATE:
        return date(today.year, 1, 1), today
    # LAST_YEAR: same day one calendar year back (Feb 29 -> Feb 28)
    try:
        start = today.replace(year=today.year - 1)
    except ValueError:
        start = today.replace(year=today.year - 1, day=28)
    return start, today


def unique_sorted(values: Iterable[str | None]) -> list[str]:
    """Distinct non-empty values, sorted (used for filter suggestions)."""
    return sorted({v for v in values if v})
