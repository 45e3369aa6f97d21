"""Record models: TrackedRecord, RecordLookup."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeline_api.models.base import Base

if TYPE_CHECKING:
    from timeline_api.models.history import FieldHistory


class TrackedRecord(Base):
    """A record whose field changes are tracked."""

    __tablename__ = "tracked_record"

    record_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    object_api_name: Mapped[str] = mapped_column(
        ForeignKey("object_type.api_name", ondelete="RESTRICT"), nullable=False
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Relationships
    lookups: Mapped[list["RecordLookup"]] = relationship(
        back_populates="record",
        cascade="all, delete-orphan",
        foreign_keys="RecordLookup.record_id",
    )
    history: Mapped[list["FieldHistory"]] = relationship(
        back_populates="record", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_record_object", "object_api_name"),
        Index("idx_record_created", "object_api_name", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<TrackedRecord({self.object_api_name} {self.record_id})>"


class RecordLookup(Base):
    """The value of a lookup field on a record (child -> parent link)."""

    __tablename__ = "record_lookup"

    lookup_id: Mapped[int] = mapped_column(primary_key=True)
    record_id: Mapped[str] = mapped_column(
        ForeignKey("tracked_record.record_id", ondelete="CASCADE"), nullable=False
    )
    field_name: Mapped[str] = mapped_column(String(100), nullable=False)
    target_record_id: Mapped[str] = mapped_column(String(64), nullable=False)

    record: Mapped["TrackedRecord"] = relationship(
        back_populates="lookups", foreign_keys=[record_id]
    )

    __table_args__ = (
        UniqueConstraint("record_id", "field_name", name="uq_record_lookup_field"),
        Index("idx_lookup_target", "target_record_id", "field_name"),
    )

    def __repr__(self) -> str:
        return f"<RecordLookup({self.record_id}.{self.field_name}={self.target_record_id})>"
