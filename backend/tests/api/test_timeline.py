"""Tests for timeline API endpoints."""

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from timeline_api.config import settings
from timeline_api.models.enums import TimelineRecordType
from timeline_api.schemas.objects import OptionSchema
from timeline_api.schemas.timeline import TimelineRowSchema

ACCOUNT = SimpleNamespace(record_id="001A", object_api_name="Account")


def _row(row_id: str, record_type: TimelineRecordType) -> TimelineRowSchema:
    return TimelineRowSchema(
        id=row_id,
        record_id="001A" if record_type == TimelineRecordType.HISTORY else row_id,
        object_api_name="Account" if record_type == TimelineRecordType.HISTORY else "Contact",
        object_label="Account",
        title="Industry changed",
        description="Changed from Retail to Technology",
        event_date=datetime(2025, 3, 4, 9, 30),
        icon_name="standard:record_update",
        record_type=record_type,
        record_url=None if record_type == TimelineRecordType.HISTORY else f"/records/{row_id}",
        created_by_name="Ada",
    )


# ---------------------------------------------------------------------------
# GET /api/v1/timeline/{record_id}
# ---------------------------------------------------------------------------


@patch("timeline_api.api.v1.timeline.get_timeline_rows", new_callable=AsyncMock)
@patch("timeline_api.api.v1.timeline.get_record", new_callable=AsyncMock)
def test_read_timeline(
    mock_record: AsyncMock, mock_rows: AsyncMock, client: TestClient
) -> None:
    """Timeline endpoint returns rows with a formatted date."""
    mock_record.return_value = ACCOUNT
    mock_rows.return_value = [
        _row("h-1", TimelineRecordType.HISTORY),
        _row("003A", TimelineRecordType.RELATED),
    ]

    response = client.get(
        "/api/v1/timeline/001A",
        params={"object_api_name": "Account", "limit": 2, "offset": 4},
    )
    assert response.status_code == 200

    data = response.json()
    assert [r["id"] for r in data] == ["h-1", "003A"]
    assert data[0]["record_type"] == "history"
    assert data[0]["record_url"] is None
    assert data[0]["date_formatted"] == "Mar 04, 2025 09:30 AM"
    assert data[1]["record_url"] == "/records/003A"

    args = mock_rows.call_args.args
    assert args[1:] == ("001A", "Account", 2, 4)


@patch("timeline_api.api.v1.timeline.get_timeline_rows", new_callable=AsyncMock)
@patch("timeline_api.api.v1.timeline.get_record", new_callable=AsyncMock)
def test_read_timeline_default_page_size(
    mock_record: AsyncMock, mock_rows: AsyncMock, client: TestClient
) -> None:
    mock_record.return_value = ACCOUNT
    mock_rows.return_value = []

    response = client.get("/api/v1/timeline/001A", params={"object_api_name": "Account"})

    assert response.status_code == 200
    assert mock_rows.call_args.args[3] == settings.default_page_size
    assert mock_rows.call_args.args[4] == 0


@patch("timeline_api.api.v1.timeline.get_record", new_callable=AsyncMock)
def test_read_timeline_missing_record(mock_record: AsyncMock, client: TestClient) -> None:
    """Unknown record returns 404."""
    mock_record.return_value = None

    response = client.get("/api/v1/timeline/001Z", params={"object_api_name": "Account"})

    assert response.status_code == 404
    assert "001Z" in response.json()["detail"]


@patch("timeline_api.api.v1.timeline.get_record", new_callable=AsyncMock)
def test_read_timeline_wrong_object_type(
    mock_record: AsyncMock, client: TestClient
) -> None:
    """A record id paired with the wrong object type is not found."""
    mock_record.return_value = ACCOUNT

    response = client.get("/api/v1/timeline/001A", params={"object_api_name": "Contact"})

    assert response.status_code == 404


def test_read_timeline_requires_object_type(client: TestClient) -> None:
    response = client.get("/api/v1/timeline/001A")
    assert response.status_code == 422


@pytest.mark.parametrize("limit", [0, settings.max_page_size + 1])
def test_read_timeline_rejects_bad_limit(limit: int, client: TestClient) -> None:
    response = client.get(
        "/api/v1/timeline/001A", params={"object_api_name": "Account", "limit": limit}
    )
    assert response.status_code == 422


# ---------------------------------------------------------------------------
# GET /api/v1/timeline/{record_id}/count and /object-types
# ---------------------------------------------------------------------------


@patch("timeline_api.api.v1.timeline.get_timeline_count", new_callable=AsyncMock)
@patch("timeline_api.api.v1.timeline.get_record", new_callable=AsyncMock)
def test_read_timeline_count(
    mock_record: AsyncMock, mock_count: AsyncMock, client: TestClient
) -> None:
    mock_record.return_value = ACCOUNT
    mock_count.return_value = 120

    response = client.get(
        "/api/v1/timeline/001A/count", params={"object_api_name": "Account"}
    )

    assert response.status_code == 200
    assert response.json() == 120


@patch("timeline_api.api.v1.timeline.get_available_object_types", new_callable=AsyncMock)
@patch("timeline_api.api.v1.timeline.get_record", new_callable=AsyncMock)
def test_read_object_types(
    mock_record: AsyncMock, mock_types: AsyncMock, client: TestClient
) -> None:
    mock_record.return_value = ACCOUNT
    mock_types.return_value = [
        OptionSchema(label="Account", value="Account"),
        OptionSchema(label="Contact", value="Contact"),
    ]

    response = client.get(
        "/api/v1/timeline/001A/object-types", params={"object_api_name": "Account"}
    )

    assert response.status_code == 200
    assert response.json() == [
        {"label": "Account", "value": "Account"},
        {"label": "Contact", "value": "Contact"},
    ]


# ---------------------------------------------------------------------------
# GET /api/v1/timeline/permission
# ---------------------------------------------------------------------------


def test_permission_for_admin(admin_settings: str, client: TestClient) -> None:
    response = client.get(
        "/api/v1/timeline/permission", headers={settings.user_header: admin_settings}
    )
    assert response.status_code == 200
    assert response.json() is True


def test_permission_for_other_user(admin_settings: str, client: TestClient) -> None:
    response = client.get(
        "/api/v1/timeline/permission", headers={settings.user_header: "someone@example.com"}
    )
    assert response.json() is False


def test_permission_anonymous(admin_settings: str, client: TestClient) -> None:
    response = client.get("/api/v1/timeline/permission")
    assert response.json() is False
