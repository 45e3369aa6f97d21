"""Object metadata models: ObjectType, ObjectRelationship."""

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from timeline_api.models.base import Base, TimestampMixin


class ObjectType(Base, TimestampMixin):
    """A registered object type (e.g. Account, Contact, Invoice__c)."""

    __tablename__ = "object_type"

    api_name: Mapped[str] = mapped_column(String(100), primary_key=True)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    plural_label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    icon_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<ObjectType({self.api_name})>"


class ObjectRelationship(Base):
    """A lookup field declared on a child object type pointing at a parent type.

    Used to auto-detect the relationship field when a child object is added
    to a parent's timeline.
    """

    __tablename__ = "object_relationship"

    relationship_id: Mapped[int] = mapped_column(primary_key=True)
    child_object_api_name: Mapped[str] = mapped_column(
        ForeignKey("object_type.api_name", ondelete="CASCADE"), nullable=False
    )
    parent_object_api_name: Mapped[str] = mapped_column(
        ForeignKey("object_type.api_name", ondelete="CASCADE"), nullable=False
    )
    field_name: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "child_object_api_name", "field_name", name="uq_object_relationship_field"
        ),
        Index("idx_relationship_parent", "parent_object_api_name"),
    )

    def __repr__(self) -> str:
        return (
            f"<ObjectRelationship({self.child_object_api_name}.{self.field_name}"
            f" -> {self.parent_object_api_name})>"
        )
