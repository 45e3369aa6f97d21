"""Pydantic schemas for timeline child configurations."""

from pydantic import BaseModel, Field, field_validator


class ChildConfigurationSchema(BaseModel):
    """A stored child configuration row."""

    id: int = Field(..., validation_alias="config_id")
    developer_name: str
    parent_object_api_name: str
    child_object_api_name: str
    child_object_label: str
    relationship_field: str
    date_field: str = "CreatedDate"
    title_field: str = "Name"
    description_field: str | None = None
    icon_name: str = "standard:record"
    is_active: bool = True

    model_config = {"from_attributes": True, "populate_by_name": True}


class ChildConfigurationCreateSchema(BaseModel):
    """Request body for saving a new child configuration."""

    parent_object_api_name: str = Field(..., min_length=1)
    child_object_api_name: str = Field(..., min_length=1)
    child_object_label: str = Field(..., min_length=1)
    relationship_field: str = Field(
        ..., description="Lookup field on the child pointing at the parent"
    )
    date_field: str = "CreatedDate"
    title_field: str = "Name"
    description_field: str | None = None
    icon_name: str = "standard:record"
    is_active: bool = True

    @field_validator("relationship_field")
    @classmethod
    def relationship_field_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("relationship_field must not be empty")
        return value


class ChildConfigurationUpdateSchema(BaseModel):
    """Request body for toggling a configuration on or off."""

    is_active: bool


class SavedConfigurationSchema(BaseModel):
    """Identifier returned after a configuration is saved."""

    id: int
