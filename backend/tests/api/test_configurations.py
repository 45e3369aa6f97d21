"""Tests for child configuration API endpoints."""

from unittest.mock import AsyncMock, patch

from fastapi.testclient import TestClient

from timeline_api.config import settings
from timeline_api.crud.configuration import (
    DuplicateConfigurationError,
    RelationshipNotFoundError,
)
from timeline_api.schemas.configuration import ChildConfigurationSchema
from timeline_api.schemas.objects import AvailableChildObjectSchema

NEW_CONFIG = {
    "parent_object_api_name": "Account",
    "child_object_api_name": "Contact",
    "child_object_label": "Contact",
    "relationship_field": "AccountId",
    "icon_name": "standard:contact",
}


def _config(config_id: int, child: str, is_active: bool = True) -> ChildConfigurationSchema:
    return ChildConfigurationSchema(
        id=config_id,
        developer_name=f"Account_{child}",
        parent_object_api_name="Account",
        child_object_api_name=child,
        child_object_label=child,
        relationship_field="AccountId",
        is_active=is_active,
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@patch("timeline_api.api.v1.configurations.list_configurations", new_callable=AsyncMock)
def test_list_configurations(mock_list: AsyncMock, client: TestClient) -> None:
    mock_list.return_value = [_config(1, "Contact"), _config(2, "Opportunity", False)]

    response = client.get(
        "/api/v1/configurations/", params={"parent_object_api_name": "Account"}
    )

    assert response.status_code == 200
    data = response.json()
    assert [c["id"] for c in data] == [1, 2]
    assert data[0]["developer_name"] == "Account_Contact"
    assert data[1]["is_active"] is False


@patch(
    "timeline_api.api.v1.configurations.get_available_child_objects",
    new_callable=AsyncMock,
)
def test_available_children(mock_children: AsyncMock, client: TestClient) -> None:
    mock_children.return_value = [
        AvailableChildObjectSchema(label="Contact", value="Contact", relationship_field="AccountId"),
        AvailableChildObjectSchema(label="Invoice", value="Invoice__c"),
    ]

    response = client.get(
        "/api/v1/configurations/available-children",
        params={"parent_object_api_name": "Account"},
    )

    assert response.status_code == 200
    assert response.json()[1] == {
        "label": "Invoice",
        "value": "Invoice__c",
        "relationship_field": None,
    }


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


@patch("timeline_api.api.v1.configurations.save_configuration", new_callable=AsyncMock)
def test_create_configuration(
    mock_save: AsyncMock, admin_settings: str, client: TestClient
) -> None:
    mock_save.return_value = 7

    response = client.post(
        "/api/v1/configurations/",
        json=NEW_CONFIG,
        headers={settings.user_header: admin_settings},
    )

    assert response.status_code == 201
    assert response.json() == {"id": 7}
    saved = mock_save.call_args.args[1]
    assert saved.date_field == "CreatedDate"
    assert saved.title_field == "Name"


@patch("timeline_api.api.v1.configurations.save_configuration", new_callable=AsyncMock)
def test_create_configuration_forbidden(
    mock_save: AsyncMock, admin_settings: str, client: TestClient
) -> None:
    response = client.post(
        "/api/v1/configurations/",
        json=NEW_CONFIG,
        headers={settings.user_header: "viewer@example.com"},
    )

    assert response.status_code == 403
    assert response.json()["detail"] == (
        "You do not have permission to configure the timeline."
    )
    mock_save.assert_not_called()


@patch("timeline_api.api.v1.configurations.save_configuration", new_callable=AsyncMock)
def test_create_configuration_duplicate(
    mock_save: AsyncMock, admin_settings: str, client: TestClient
) -> None:
    mock_save.side_effect = DuplicateConfigurationError("Contact is already on the Account timeline.")

    response = client.post(
        "/api/v1/configurations/",
        json=NEW_CONFIG,
        headers={settings.user_header: admin_settings},
    )

    assert response.status_code == 409
    assert "already" in response.json()["detail"]


@patch("timeline_api.api.v1.configurations.save_configuration", new_callable=AsyncMock)
def test_create_configuration_without_relationship(
    mock_save: AsyncMock, admin_settings: str, client: TestClient
) -> None:
    mock_save.side_effect = RelationshipNotFoundError("No relationship found")

    response = client.post(
        "/api/v1/configurations/",
        json={**NEW_CONFIG, "relationship_field": "Bogus__c"},
        headers={settings.user_header: admin_settings},
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "No relationship found"


def test_create_configuration_blank_relationship(
    admin_settings: str, client: TestClient
) -> None:
    response = client.post(
        "/api/v1/configurations/",
        json={**NEW_CONFIG, "relationship_field": "  "},
        headers={settings.user_header: admin_settings},
    )
    assert response.status_code == 422


@patch(
    "timeline_api.api.v1.configurations.set_configuration_active",
    new_callable=AsyncMock,
)
def test_update_configuration(
    mock_set: AsyncMock, admin_settings: str, client: TestClient
) -> None:
    mock_set.return_value = _config(3, "Contact", is_active=False)

    response = client.patch(
        "/api/v1/configurations/3",
        json={"is_active": False},
        headers={settings.user_header: admin_settings},
    )

    assert response.status_code == 200
    assert response.json()["is_active"] is False
    assert mock_set.call_args.args[1:] == (3, False)


@patch(
    "timeline_api.api.v1.configurations.set_configuration_active",
    new_callable=AsyncMock,
)
def test_update_configuration_missing(
    mock_set: AsyncMock, admin_settings: str, client: TestClient
) -> None:
    mock_set.return_value = None

    response = client.patch(
        "/api/v1/configurations/99",
        json={"is_active": True},
        headers={settings.user_header: admin_settings},
    )

    assert response.status_code == 404


@patch("timeline_api.api.v1.configurations.delete_configuration", new_callable=AsyncMock)
def test_delete_configuration(
    mock_delete: AsyncMock, admin_settings: str, client: TestClient
) -> None:
    mock_delete.return_value = True

    response = client.delete(
        "/api/v1/configurations/3", headers={settings.user_header: admin_settings}
    )

    assert response.status_code == 204
    assert response.content == b""


@patch("timeline_api.api.v1.configurations.delete_configuration", new_callable=AsyncMock)
def test_delete_configuration_missing(
    mock_delete: AsyncMock, admin_settings: str, client: TestClient
) -> None:
    mock_delete.return_value = False

    response = client.delete(
        "/api/v1/configurations/3", headers={settings.user_header: admin_settings}
    )

    assert response.status_code == 404
