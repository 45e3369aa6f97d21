"""Field history model: one recorded change of a tracked field."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timeline_api.models.base import Base

if TYPE_CHECKING:
    from timeline_api.models.record import TrackedRecord


class FieldHistory(Base):
    """Prior and new value of a monitored field at the time it changed."""

    __tablename__ = "field_history"

    history_id: Mapped[int] = mapped_column(primary_key=True)
    record_id: Mapped[str] = mapped_column(
        ForeignKey("tracked_record.record_id", ondelete="CASCADE"), nullable=False
    )
    field_name: Mapped[str] = mapped_column(String(100), nullable=False)
    field_label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    old_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    new_value: Mapped[str | None] = mapped_column(Text, nullable=True)
    changed_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    changed_at: Mapped[datetime] = mapped_column(nullable=False)

    # Relationships
    record: Mapped["TrackedRecord"] = relationship(back_populates="history")

    __table_args__ = (
        Index("idx_history_record", "record_id"),
        Index("idx_history_record_date", "record_id", "changed_at"),
        Index("idx_history_changed_at", "changed_at"),
    )

    def __repr__(self) -> str:
        return f"<FieldHistory(record={self.record_id}, field={self.field_name})>"
