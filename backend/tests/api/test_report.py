"""Tests for history report API endpoints."""

from datetime import date, datetime
from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from timeline_api.schemas.objects import OptionSchema
from timeline_api.schemas.report import HistoryReportPageSchema, HistoryReportRowSchema


@patch("timeline_api.api.v1.report.get_configured_objects", new_callable=AsyncMock)
def test_configured_objects(mock_objects: AsyncMock, client: TestClient) -> None:
    mock_objects.return_value = [OptionSchema(label="Contact", value="Contact")]

    response = client.get("/api/v1/report/objects")

    assert response.status_code == 200
    assert response.json() == [{"label": "Contact", "value": "Contact"}]


@patch("timeline_api.api.v1.report.get_history_report", new_callable=AsyncMock)
def test_history_report(mock_report: AsyncMock, client: TestClient) -> None:
    mock_report.return_value = HistoryReportPageSchema(
        records=[
            HistoryReportRowSchema(
                id="12",
                object_api_name="Contact",
                object_label="Contact",
                record_id="003A",
                record_name="Grace Hopper",
                record_url="/records/003A",
                field_changed="Title",
                new_value="Rear Admiral",
                changed_by="Linus",
                changed_date=datetime(2024, 3, 10, 23, 59, 59),
            )
        ],
        has_more=True,
    )

    response = client.get(
        "/api/v1/report/history",
        params={
            "object_api_names": ["Contact", "Opportunity"],
            "start_date": "2024-03-01",
            "end_date": "2024-03-10",
            "limit": 50,
            "offset": 50,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["has_more"] is True
    assert data["records"][0]["record_name"] == "Grace Hopper"
    assert mock_report.call_args.args[1:] == (
        ["Contact", "Opportunity"],
        date(2024, 3, 1),
        date(2024, 3, 10),
        50,
        50,
    )


@patch("timeline_api.api.v1.report.get_history_report", new_callable=AsyncMock)
def test_history_report_no_objects(mock_report: AsyncMock, client: TestClient) -> None:
    mock_report.return_value = HistoryReportPageSchema()

    response = client.get("/api/v1/report/history")

    assert response.status_code == 200
    assert response.json() == {"records": [], "has_more": False}
    assert mock_report.call_args.args[1] == []


def test_history_report_inverted_range(client: TestClient) -> None:
    response = client.get(
        "/api/v1/report/history",
        params={"object_api_names": ["Contact"], "start_date": "2024-03-10", "end_date": "2024-03-01"},
    )
    assert response.status_code == 400


@patch("timeline_api.api.v1.report.get_history_report_count", new_callable=AsyncMock)
def test_history_report_count(mock_count: AsyncMock, client: TestClient) -> None:
    mock_count.return_value = 1234

    response = client.get(
        "/api/v1/report/history/count", params={"object_api_names": ["Contact"]}
    )

    assert response.status_code == 200
    assert response.json() == 1234
    assert mock_count.call_args.args[1:] == (["Contact"], None, None)
