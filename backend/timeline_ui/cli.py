"""CLI for seeding the timeline database and browsing timelines and reports."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date
from pathlib import Path

from timeline_api.config import settings
from timeline_ui.client import TimelineApiClient
from timeline_ui.notifications import LoggingNotifier
from timeline_ui.report import HistoryReport
from timeline_ui.viewer import TimelineViewer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)-5.5s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Database commands
# =============================================================================


async def init_db_command() -> int:
    """Create any missing tables in the configured database."""
    from timeline_api.models.base import create_all

    await create_all()
    print(f"Tables created in {settings.database_url}")
    return 0


async def load_fixture_command(path: Path) -> int:
    """Load a JSON fixture file into the database.

    Args:
        path: Path to a JSON file matching FixtureSchema.

    Returns:
        0 on success, 1 if the file is missing or invalid.
    """
    from pydantic import ValidationError

    from timeline_api.crud.fixtures import load_fixture
    from timeline_api.models.base import async_session_maker
    from timeline_api.schemas.fixtures import FixtureSchema

    if not path.exists():
        print(f"Error: File not found: {path}")
        return 1

    try:
        fixture = FixtureSchema.model_validate_json(path.read_text())
    except ValidationError as e:
        print(f"Error: Invalid fixture {path}:\n{e}")
        return 1

    async with async_session_maker() as session:
        result = await load_fixture(session, fixture)

    print(f"\nLoaded {path}")
    print(f"  Object types:   {result.object_types}")
    print(f"  Relationships:  {result.relationships}")
    print(f"  Records:        {result.records}")
    print(f"  History rows:   {result.history}")
    print(f"  Configurations: {result.configurations}")
    return 0


# =============================================================================
# Timeline commands
# =============================================================================


async def timeline_command(
    record_id: str,
    object_api_name: str,
    api_url: str | None = None,
    user: str | None = None,
    limit: int = 50,
    load_all: bool = False,
    types: list[str] | None = None,
) -> int:
    """Print a record's timeline.

    Args:
        record_id: Record whose timeline to show.
        object_api_name: Object type of the record.
        api_url: API root; defaults to settings.api_base_url.
        user: User sent in the user header.
        limit: Page size.
        load_all: Keep loading pages until everything is shown.
        types: Only show these object types.
    """
    async with TimelineApiClient(base_url=api_url, user=user) as api:
        viewer = TimelineViewer(api, record_id, object_api_name, max_records=limit)
        await viewer.load()
        while load_all and viewer.has_more:
            await viewer.load_more()
            if viewer.has_error:
                break

    if viewer.has_error:
        print(f"Error: {viewer.error_message}")
        return 1

    if types:
        viewer.clear_all()
        for value in types:
            viewer.toggle_filter(value)

    print(f"\n{viewer.header_title}")
    if viewer.object_types:
        print("  Filters: " + ", ".join(
            f"{t.label}{'' if t.selected else ' (off)'}" for t in viewer.object_types
        ))
    print()

    if not viewer.has_records:
        print(f"  {viewer.empty_message}")
        return 0

    for item in viewer.items:
        marker = "*" if item.is_history_record else "-"
        print(f"  {marker} {item.date_formatted}  [{item.object_label}] {item.title}")
        if item.has_description:
            print(f"      {item.description}")

    if viewer.has_more:
        print(f"\n  ... {viewer.total_record_count - len(viewer.rows)} more (use --all)")
    return 0


async def report_command(
    objects: list[str],
    start: date | None = None,
    end: date | None = None,
    preset: str | None = None,
    field: str | None = None,
    changed_by: str | None = None,
    api_url: str | None = None,
    user: str | None = None,
    load_all: bool = False,
) -> int:
    """Print the cross-object history report."""
    async with TimelineApiClient(base_url=api_url, user=user) as api:
        report = HistoryReport(api, notifier=LoggingNotifier())
        report.select_objects(objects)
        if preset:
            report.apply_date_preset(preset)
        if start:
            report.set_start_date(start)
        if end:
            report.set_end_date(end)

        await report.apply_filters()
        while load_all and report.has_more:
            before = len(report.all_loaded)
            await report.load_more()
            if len(report.all_loaded) == before:
                break

    if report.has_error:
        print(f"Error: {report.error_message}")
        return 1

    if field:
        report.set_field_filter(field)
    if changed_by:
        report.set_changed_by_filter(changed_by)

    print(f"\nHistory report: {', '.join(objects)}")
    if report.start_date or report.end_date:
        print(f"  {report.start_date or '...'} to {report.end_date or '...'}")
    print(f"  {report.record_count_label}\n")

    if report.show_empty_state:
        print(f"  {report.empty_state_message}")
        return 0

    for row in report.table_data:
        print(
            f"  {row.changed_date:%Y-%m-%d %H:%M}  {row.object_label or row.object_api_name:<14} "
            f"{row.record_name or row.record_id:<24} {row.field_changed or '':<18} "
            f"{row.old_value or '':>12} -> {row.new_value or ''}  ({row.changed_by or '?'})"
        )
    return 0


def main() -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(description="Record timeline CLI")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Init-db command
    subparsers.add_parser("init-db", help="Create database tables")

    # Load-fixture command
    fixture_parser = subparsers.add_parser(
        "load-fixture", help="Load object types, records and history from JSON"
    )
    fixture_parser.add_argument(
        "path",
        type=Path,
        help="Path to the fixture file",
    )

    # Options shared by the commands that talk to the API
    api_options = argparse.ArgumentParser(add_help=False)
    api_options.add_argument(
        "--api-url",
        default=None,
        help=f"API root (default: {settings.api_base_url})",
    )
    api_options.add_argument(
        "--user",
        default=None,
        help=f"User to send in the {settings.user_header} header",
    )
    api_options.add_argument(
        "--all",
        action="store_true",
        dest="load_all",
        help="Keep loading pages until everything is shown",
    )

    # Timeline command
    timeline_parser = subparsers.add_parser(
        "timeline", parents=[api_options], help="Show a record's timeline"
    )
    timeline_parser.add_argument("record_id", help="Record id")
    timeline_parser.add_argument("object_api_name", help="Object type of the record")
    timeline_parser.add_argument(
        "--limit",
        type=int,
        default=50,
        help="Page size (default: 50)",
    )
    timeline_parser.add_argument(
        "--type",
        action="append",
        dest="types",
        help="Only show this object type (repeatable)",
    )

    # Report command
    report_parser = subparsers.add_parser(
        "report", parents=[api_options], help="Show the cross-object history report"
    )
    report_parser.add_argument(
        "--object",
        action="append",
        dest="objects",
        required=True,
        help="Object type to include (repeatable)",
    )
    report_parser.add_argument(
        "--from",
        dest="start",
        type=date.fromisoformat,
        help="Start date (YYYY-MM-DD)",
    )
    report_parser.add_argument(
        "--to",
        dest="end",
        type=date.fromisoformat,
        help="End date (YYYY-MM-DD)",
    )
    report_parser.add_argument(
        "--preset",
        choices=["last7", "last30", "last90", "lastYear", "ytd"],
        help="Date preset; --from/--to override it",
    )
    report_parser.add_argument("--field", help="Filter on the changed field label")
    report_parser.add_argument("--changed-by", help="Filter on the user who changed it")

    args = parser.parse_args()

    if args.command == "init-db":
        return asyncio.run(init_db_command())

    elif args.command == "load-fixture":
        return asyncio.run(load_fixture_command(args.path))

    elif args.command == "timeline":
        return asyncio.run(
            timeline_command(
                record_id=args.record_id,
                object_api_name=args.object_api_name,
                api_url=args.api_url,
                user=args.user,
                limit=args.limit,
                load_all=args.load_all,
                types=args.types,
            )
        )

    elif args.command == "report":
        return asyncio.run(
            report_command(
                objects=args.objects,
                start=args.start,
                end=args.end,
                preset=args.preset,
                field=args.field,
                changed_by=args.changed_by,
                api_url=args.api_url,
                user=args.user,
                load_all=args.load_all,
            )
        )

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
