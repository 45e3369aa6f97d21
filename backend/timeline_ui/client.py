"""HTTP client for the record timeline API.

Every remote operation the view-state components need is a method here;
responses are parsed into the same pydantic schemas the API serves.
Failures surface as RemoteCallError, never as raw httpx exceptions.
"""

import logging
from datetime import date
from typing import Any

import httpx
from pydantic import TypeAdapter

from timeline_api.config import settings
from timeline_api.schemas.configuration import (
    ChildConfigurationCreateSchema,
    ChildConfigurationSchema,
    SavedConfigurationSchema,
)
from timeline_api.schemas.objects import (
    AvailableChildObjectSchema,
    ObjectTypeSchema,
    OptionSchema,
)
from timeline_api.schemas.report import HistoryReportPageSchema
from timeline_api.schemas.timeline import TimelineRowSchema

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "An unexpected error occurred."

_timeline_rows = TypeAdapter(list[TimelineRowSchema])
_options = TypeAdapter(list[OptionSchema])
_configurations = TypeAdapter(list[ChildConfigurationSchema])
_available_children = TypeAdapter(list[AvailableChildObjectSchema])


class RemoteCallError(Exception):
    """A remote operation failed.

    Attributes:
        message: Human-readable reason.
        status_code: HTTP status, or None when the server was not reached.
        body: Decoded JSON error body, when there was one.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


def _structured_message(body: Any) -> str | None:
    """Pull the message out of a {"message": ...} or {"detail": ...} body."""
    if not isinstance(body, dict):
        return None
    for key in ("message", "detail"):
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
        if isinstance(value, list):
            # FastAPI validation errors: [{"loc": [...], "msg": "..."}]
            msgs = [v.get("msg") for v in value if isinstance(v, dict) and v.get("msg")]
            if msgs:
                return "; ".join(msgs)
    return None


def extract_error_message(error: BaseException | None) -> str:
    """Reduce a failure to something a user can read.

    Prefers a structured message from the error body, then the exception's
    own message, then a fixed default.
    """
    if error is None:
        return DEFAULT_ERROR_MESSAGE
    structured = _structured_message(getattr(error, "body", None))
    if structured:
        return structured
    return str(error) or DEFAULT_ERROR_MESSAGE


def _date_param(value: date | str | None) -> str | None:
    if value is None or value == "":
        return None
    return value.isoformat() if isinstance(value, date) else value


class TimelineApiClient:
    """Async client for the /api/v1 endpoints.

    Use as an async context manager, or call aclose() when done:

        async with TimelineApiClient(user="admin") as api:
            rows = await api.get_timeline_data("001A", "Account", limit=50)
    """

    def __init__(
        self,
        base_url: str | None = None,
        user: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root including /api/v1. Defaults to settings.api_base_url.
            user: Sent in the configured user header (settings.user_header).
            timeout: Request timeout in seconds. Defaults to settings.request_timeout.
            transport: Optional httpx transport (tests pass httpx.MockTransport).
        """
        headers = {settings.user_header: user} if user else {}
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout or settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "TimelineApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body (None for 204)."""
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                body = e.response.json()
            except ValueError:
                body = None
            message = _structured_message(body) or (
                f"{e.response.status_code} {e.response.reason_phrase}".strip()
            )
            logger.warning(f"{method} {path} failed: {message}")
            raise RemoteCallError(message, e.response.status_code, body) from e
        except httpx.RequestError as e:
            logger.warning(f"{method} {path} failed: {e!r}")
            raise RemoteCallError(str(e) or DEFAULT_ERROR_MESSAGE) from e

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # -------------------------------------------------------------------------
    # Objects and timeline
    # -------------------------------------------------------------------------

    async def get_object_info(self, api_name: str) -> ObjectTypeSchema:
        data = await self._request("GET", f"/objects/{api_name}")
        return ObjectTypeSchema.model_validate(data)

    async def get_timeline_data(
        self,
        record_id: str,
        object_api_name: str,
        limit: int,
        offset: int = 0,
    ) -> list[TimelineRowSchema]:
        data = await self._request(
            "GET",
            f"/timeline/{record_id}",
            params={"object_api_name": object_api_name, "limit": limit, "offset": offset},
        )
        return _timeline_rows.validate_python(data)

    async def get_timeline_record_count(self, record_id: str, object_api_name: str) -> int:
        data = await self._request(
            "GET",
            f"/timeline/{record_id}/count",
            params={"object_api_name": object_api_name},
        )
        return int(data)

    async def has_config_permission(self) -> bool:
        return bool(await self._request("GET", "/timeline/permission"))

    async def get_available_object_types(
        self, record_id: str, object_api_name: str
    ) -> list[OptionSchema]:
        data = await self._request(
            "GET",
            f"/timeline/{record_id}/object-types",
            params={"object_api_name": object_api_name},
        )
        return _options.validate_python(data)

    # -------------------------------------------------------------------------
    # Child configurations
    # -------------------------------------------------------------------------

    async def get_child_configurations(
        self, parent_object_api_name: str
    ) -> list[ChildConfigurationSchema]:
        data = await self._request(
            "GET",
            "/configurations/",
            params={"parent_object_api_name": parent_object_api_name},
        )
        return _configurations.validate_python(data)

    async def get_available_child_objects(
        self, parent_object_api_name: str
    ) -> list[AvailableChildObjectSchema]:
        data = await self._request(
            "GET",
            "/configurations/available-children",
            params={"parent_object_api_name": parent_object_api_name},
        )
        return _available_children.validate_python(data)

    async def save_child_configuration(self, config: ChildConfigurationCreateSchema) -> int:
        data = await self._request(
            "POST", "/configurations/", json=config.model_dump(mode="json")
        )
        return SavedConfigurationSchema.model_validate(data).id

    async def set_configuration_active(
        self, config_id: int, is_active: bool
    ) -> ChildConfigurationSchema:
        data = await self._request(
            "PATCH", f"/configurations/{config_id}", json={"is_active": is_active}
        )
        return ChildConfigurationSchema.model_validate(data)

    async def delete_child_configuration(self, config_id: int) -> None:
        await self._request("DELETE", f"/configurations/{config_id}")

    # -------------------------------------------------------------------------
    # History report
    # -------------------------------------------------------------------------

    async def get_configured_objects(self) -> list[OptionSchema]:
        return _options.validate_python(await self._request("GET", "/report/objects"))

    @staticmethod
    def _report_params(
        object_api_names: list[str],
        start_date: date | str | None,
        end_date: date | str | None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"object_api_names": list(object_api_names)}
        if (start := _date_param(start_date)) is not None:
            params["start_date"] = start
        if (end := _date_param(end_date)) is not None:
            params["end_date"] = end
        return params

    async def get_history_report(
        self,
        object_api_names: list[str],
        start_date: date | str | None,
        end_date: date | str | None,
        limit: int,
        offset: int = 0,
    ) -> HistoryReportPageSchema:
        params = self._report_params(object_api_names, start_date, end_date)
        params.update(limit=limit, offset=offset)
        data = await self._request("GET", "/report/history", params=params)
        return HistoryReportPageSchema.model_validate(data)

    async def get_history_report_count(
        self,
        object_api_names: list[str],
        start_date: date | str | None,
        end_date: date | str | None,
    ) -> int:
        params = self._report_params(object_api_names, start_date, end_date)
        return int(await self._request("GET", "/report/history/count", params=params))
