"""Pydantic schemas for object metadata."""

from pydantic import BaseModel, Field


class OptionSchema(BaseModel):
    """A label/value pair offered as a filter or picker option."""

    label: str
    value: str


class ObjectTypeSchema(BaseModel):
    """Metadata for a registered object type."""

    api_name: str
    label: str
    plural_label: str | None = None
    icon_name: str | None = None

    model_config = {"from_attributes": True}


class AvailableChildObjectSchema(BaseModel):
    """A candidate child object for a parent's timeline.

    relationship_field is the lookup on the child pointing at the parent,
    or None when the two types are not related.
    """

    label: str
    value: str = Field(..., description="Child object api name")
    relationship_field: str | None = None
