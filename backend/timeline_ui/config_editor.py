"""Config editor: add and remove the child object types shown on a timeline.

Selecting a child object looks up its precomputed relationship field and,
when one exists, saves the configuration straight away. Both saving and
removing, as well as enabling or disabling, emit on_save so the hosting
timeline can refresh.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from timeline_api.models.configuration import make_developer_name
from timeline_api.schemas.configuration import (
    ChildConfigurationCreateSchema,
    ChildConfigurationSchema,
)
from timeline_api.schemas.objects import AvailableChildObjectSchema
from timeline_ui.client import RemoteCallError, TimelineApiClient, extract_error_message
from timeline_ui.icons import icon_for_object
from timeline_ui.notifications import Notification, Notifier, Variant

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[None] | None]

DEFAULT_DATE_FIELD = "CreatedDate"
DEFAULT_TITLE_FIELD = "Name"
OBJECT_NOT_FOUND_ERROR = "Selected object not found in available relationships."


async def _emit(callback: Callback | None) -> None:
    if callback is None:
        return
    result = callback()
    if inspect.isawaitable(result):
        await result


class ConfigEditor:
    """View state of the timeline configuration modal for one parent type."""

    def __init__(
        self,
        api: TimelineApiClient,
        object_api_name: str,
        *,
        notifier: Notifier | None = None,
        on_save: Callback | None = None,
        on_close: Callback | None = None,
    ):
        self.api = api
        self.object_api_name = object_api_name
        self.notifier = notifier
        self.on_save = on_save
        self.on_close = on_close

        self.existing_configs: list[ChildConfigurationSchema] = []
        self.available_objects: list[AvailableChildObjectSchema] = []
        self.is_loading = False
        self.is_saving = False
        self.add_form_visible = False

        # Form fields, filled in from the selected object
        self.selected_object = ""
        self.selected_relationship_field = ""
        self.child_object_label = ""
        self.relationship_error = ""

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def active_configs(self) -> list[ChildConfigurationSchema]:
        return [c for c in self.existing_configs if c.is_active]

    @property
    def has_configs(self) -> bool:
        return bool(self.existing_configs)

    @property
    def object_options(self) -> list[AvailableChildObjectSchema]:
        """Available child objects that are not already actively configured."""
        configured = {c.child_object_api_name for c in self.active_configs}
        return [o for o in self.available_objects if o.value not in configured]

    @property
    def has_relationship_error(self) -> bool:
        return bool(self.relationship_error)

    @property
    def is_add_disabled(self) -> bool:
        return not self.object_options

    @property
    def is_save_disabled(self) -> bool:
        return (
            not self.selected_object
            or not self.selected_relationship_field
            or self.is_saving
            or self.has_relationship_error
        )

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    async def load(self) -> None:
        """Fetch existing configurations and candidate child objects."""
        self.is_loading = True
        try:
            await asyncio.gather(self._load_configs(), self._load_available_objects())
        finally:
            self.is_loading = False

    async def _load_configs(self) -> None:
        try:
            self.existing_configs = await self.api.get_child_configurations(
                self.object_api_name
            )
        except RemoteCallError as e:
            self._notify("Error", extract_error_message(e), Variant.ERROR)

    async def _load_available_objects(self) -> None:
        try:
            self.available_objects = await self.api.get_available_child_objects(
                self.object_api_name
            )
        except RemoteCallError as e:
            logger.error(f"Error fetching child objects: {extract_error_message(e)}")

    def show_add_form(self) -> None:
        self.reset_form()
        self.add_form_visible = True

    def cancel_add(self) -> None:
        self.add_form_visible = False
        self.reset_form()

    def reset_form(self) -> None:
        self.selected_object = ""
        self.selected_relationship_field = ""
        self.child_object_label = ""
        self.relationship_error = ""

    async def select_object(self, value: str) -> int | None:
        """Pick a child object; saves immediately when it relates to the parent.

        Returns the new configuration id, or None when nothing was saved.
        """
        self.selected_object = value
        self.relationship_error = ""

        selected = next((o for o in self.available_objects if o.value == value), None)
        if selected is None:
            self.relationship_error = OBJECT_NOT_FOUND_ERROR
            self.selected_relationship_field = ""
            self.child_object_label = ""
            return None

        if not selected.relationship_field:
            self.relationship_error = (
                f"No relationship found between {self.object_api_name} and {value}. "
                "This object cannot be added to the timeline."
            )
            self.selected_relationship_field = ""
            self.child_object_label = ""
            return None

        self.selected_relationship_field = selected.relationship_field
        self.child_object_label = selected.label
        return await self.save_configuration()

    async def save_configuration(self) -> int | None:
        """Persist the selected object and add it to the local list."""
        if not self.selected_object or not self.selected_relationship_field:
            return None

        self.is_saving = True
        icon = icon_for_object(self.selected_object)
        config = ChildConfigurationCreateSchema(
            parent_object_api_name=self.object_api_name,
            child_object_api_name=self.selected_object,
            child_object_label=self.child_object_label,
            relationship_field=self.selected_relationship_field,
            date_field=DEFAULT_DATE_FIELD,
            title_field=DEFAULT_TITLE_FIELD,
            description_field=None,
            icon_name=icon,
            is_active=True,
        )
        try:
            config_id = await self.api.save_child_configuration(config)
        except RemoteCallError as e:
            self._notify("Error", extract_error_message(e), Variant.ERROR)
            return None
        finally:
            self.is_saving = False

        saved = ChildConfigurationSchema(
            id=config_id,
            developer_name=make_developer_name(self.object_api_name, self.selected_object),
            **config.model_dump(),
        )
        # Re-adding a disabled child reactivates its existing row
        self._replace_or_append(saved)
        self._notify(
            "Success", f"{self.child_object_label} added to timeline.", Variant.SUCCESS
        )
        self.add_form_visible = False
        self.reset_form()
        await _emit(self.on_save)
        return config_id

    async def remove(self, config_id: int, label: str) -> bool:
        """Delete one configuration remotely, then drop exactly that row locally."""
        try:
            await self.api.delete_child_configuration(config_id)
        except RemoteCallError as e:
            self._notify("Error", extract_error_message(e), Variant.ERROR)
            return False

        self._notify("Success", f"{label} removed from timeline.", Variant.SUCCESS)
        self.existing_configs = [c for c in self.existing_configs if c.id != config_id]
        await _emit(self.on_save)
        return True

    async def set_active(self, config_id: int, is_active: bool, label: str) -> bool:
        """Turn one configuration on or off without deleting it."""
        try:
            updated = await self.api.set_configuration_active(config_id, is_active)
        except RemoteCallError as e:
            self._notify("Error", extract_error_message(e), Variant.ERROR)
            return False

        self._replace_or_append(updated)
        state = "enabled" if is_active else "disabled"
        self._notify("Success", f"{label} {state} on timeline.", Variant.SUCCESS)
        await _emit(self.on_save)
        return True

    async def close(self) -> None:
        await _emit(self.on_close)

    def _replace_or_append(self, config: ChildConfigurationSchema) -> None:
        if any(c.id == config.id for c in self.existing_configs):
            self.existing_configs = [
                config if c.id == config.id else c for c in self.existing_configs
            ]
        else:
            self.existing_configs = [*self.existing_configs, config]

    def _notify(self, title: str, message: str, variant: Variant) -> None:
        if self.notifier is not None:
            self.notifier.notify(Notification(title, message, variant))
