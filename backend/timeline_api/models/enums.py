"""Enumerations shared by models, schemas and the view-state layer."""

import enum


class TimelineRecordType(str, enum.Enum):
    """Kind of row shown on a timeline."""

    HISTORY = "history"  # Field change on the record itself (not navigable)
    RELATED = "related"  # A related child record (navigable)


class DatePreset(str, enum.Enum):
    """Quick date ranges offered by the history report."""

    LAST_7_DAYS = "last7"
    LAST_30_DAYS = "last30"
    LAST_90_DAYS = "last90"
    LAST_YEAR = "lastYear"
    YEAR_TO_DATE = "ytd"


class SortDirection(str, enum.Enum):
    """Column sort direction."""

    ASC = "asc"
    DESC = "desc"
