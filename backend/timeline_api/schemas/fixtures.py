"""Pydantic schemas for seed data files loaded by ``timeline-cli load-fixture``."""

from datetime import datetime

from pydantic import BaseModel, Field

from timeline_api.schemas.configuration import ChildConfigurationCreateSchema


class ObjectTypeFixture(BaseModel):
    api_name: str
    label: str
    plural_label: str | None = None
    icon_name: str | None = None


class RelationshipFixture(BaseModel):
    """A lookup field declared on a child type that points at a parent type."""

    child: str
    parent: str
    field: str


class RecordFixture(BaseModel):
    record_id: str
    object_api_name: str
    name: str | None = None
    created_at: datetime
    created_by: str | None = None
    lookups: dict[str, str] = Field(
        default_factory=dict, description="Lookup field name -> target record id"
    )


class FieldHistoryFixture(BaseModel):
    record_id: str
    field_name: str
    field_label: str | None = None
    old_value: str | None = None
    new_value: str | None = None
    changed_by: str | None = None
    changed_at: datetime


class FixtureSchema(BaseModel):
    """Everything needed to seed a timeline database."""

    object_types: list[ObjectTypeFixture] = Field(default_factory=list)
    relationships: list[RelationshipFixture] = Field(default_factory=list)
    records: list[RecordFixture] = Field(default_factory=list)
    history: list[FieldHistoryFixture] = Field(default_factory=list)
    configurations: list[ChildConfigurationCreateSchema] = Field(default_factory=list)
