"""Timeline child configuration model."""

import re

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from timeline_api.models.base import Base, TimestampMixin

_DEVELOPER_NAME_INVALID = re.compile(r"[^a-zA-Z0-9_]")


def make_developer_name(parent_object_api_name: str, child_object_api_name: str) -> str:
    """Build the unique developer name for a parent/child pair."""
    return _DEVELOPER_NAME_INVALID.sub(
        "_", f"{parent_object_api_name}_{child_object_api_name}"
    )


class ChildConfiguration(Base, TimestampMixin):
    """Which child object type appears on a parent's timeline, and how it links back."""

    __tablename__ = "child_configuration"

    config_id: Mapped[int] = mapped_column(primary_key=True)
    developer_name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    parent_object_api_name: Mapped[str] = mapped_column(String(100), nullable=False)
    child_object_api_name: Mapped[str] = mapped_column(String(100), nullable=False)
    child_object_label: Mapped[str] = mapped_column(String(255), nullable=False)
    relationship_field: Mapped[str] = mapped_column(String(100), nullable=False)
    date_field: Mapped[str] = mapped_column(String(100), default="CreatedDate")
    title_field: Mapped[str] = mapped_column(String(100), default="Name")
    description_field: Mapped[str | None] = mapped_column(String(100), nullable=True)
    icon_name: Mapped[str] = mapped_column(String(100), default="standard:record")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index("idx_config_parent_active", "parent_object_api_name", "is_active"),
    )

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return f"<ChildConfiguration({self.developer_name}, {state})>"
