"""Create object metadata, record, field history and child configuration tables

Revision ID: 4c1d2e3f5a60
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4c1d2e3f5a60"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.Column(
            "updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
    ]


def upgrade() -> None:
    """Create the timeline schema."""
    op.create_table(
        "object_type",
        sa.Column("api_name", sa.String(length=100), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("plural_label", sa.String(length=255), nullable=True),
        sa.Column("icon_name", sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("api_name", name="pk_object_type"),
    )

    op.create_table(
        "object_relationship",
        sa.Column("relationship_id", sa.Integer(), nullable=False),
        sa.Column("child_object_api_name", sa.String(length=100), nullable=False),
        sa.Column("parent_object_api_name", sa.String(length=100), nullable=False),
        sa.Column("field_name", sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(
            ["child_object_api_name"],
            ["object_type.api_name"],
            name="fk_object_relationship_child_object_api_name_object_type",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["parent_object_api_name"],
            ["object_type.api_name"],
            name="fk_object_relationship_parent_object_api_name_object_type",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("relationship_id", name="pk_object_relationship"),
        sa.UniqueConstraint(
            "child_object_api_name", "field_name", name="uq_object_relationship_field"
        ),
    )
    op.create_index(
        "idx_relationship_parent", "object_relationship", ["parent_object_api_name"]
    )

    op.create_table(
        "tracked_record",
        sa.Column("record_id", sa.String(length=64), nullable=False),
        sa.Column("object_api_name", sa.String(length=100), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("created_by", sa.String(length=255), nullable=True),
        sa.ForeignKeyConstraint(
            ["object_api_name"],
            ["object_type.api_name"],
            name="fk_tracked_record_object_api_name_object_type",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("record_id", name="pk_tracked_record"),
    )
    op.create_index("idx_record_object", "tracked_record", ["object_api_name"])
    op.create_index(
        "idx_record_created", "tracked_record", ["object_api_name", "created_at"]
    )

    op.create_table(
        "record_lookup",
        sa.Column("lookup_id", sa.Integer(), nullable=False),
        sa.Column("record_id", sa.String(length=64), nullable=False),
        sa.Column("field_name", sa.String(length=100), nullable=False),
        sa.Column("target_record_id", sa.String(length=64), nullable=False),
        sa.ForeignKeyConstraint(
            ["record_id"],
            ["tracked_record.record_id"],
            name="fk_record_lookup_record_id_tracked_record",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("lookup_id", name="pk_record_lookup"),
        sa.UniqueConstraint("record_id", "field_name", name="uq_record_lookup_field"),
    )
    op.create_index(
        "idx_lookup_target", "record_lookup", ["target_record_id", "field_name"]
    )

    op.create_table(
        "field_history",
        sa.Column("history_id", sa.Integer(), nullable=False),
        sa.Column("record_id", sa.String(length=64), nullable=False),
        sa.Column("field_name", sa.String(length=100), nullable=False),
        sa.Column("field_label", sa.String(length=255), nullable=True),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("changed_by", sa.String(length=255), nullable=True),
        sa.Column("changed_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["record_id"],
            ["tracked_record.record_id"],
            name="fk_field_history_record_id_tracked_record",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("history_id", name="pk_field_history"),
    )
    op.create_index("idx_history_record", "field_history", ["record_id"])
    op.create_index(
        "idx_history_record_date", "field_history", ["record_id", "changed_at"]
    )
    op.create_index("idx_history_changed_at", "field_history", ["changed_at"])

    op.create_table(
        "child_configuration",
        sa.Column("config_id", sa.Integer(), nullable=False),
        sa.Column("developer_name", sa.String(length=255), nullable=False),
        sa.Column("parent_object_api_name", sa.String(length=100), nullable=False),
        sa.Column("child_object_api_name", sa.String(length=100), nullable=False),
        sa.Column("child_object_label", sa.String(length=255), nullable=False),
        sa.Column("relationship_field", sa.String(length=100), nullable=False),
        sa.Column("date_field", sa.String(length=100), nullable=False),
        sa.Column("title_field", sa.String(length=100), nullable=False),
        sa.Column("description_field", sa.String(length=100), nullable=True),
        sa.Column("icon_name", sa.String(length=100), nullable=False),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.true(), nullable=False
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("config_id", name="pk_child_configuration"),
        sa.UniqueConstraint(
            "developer_name", name="uq_child_configuration_developer_name"
        ),
    )
    op.create_index(
        "idx_config_parent_active",
        "child_configuration",
        ["parent_object_api_name", "is_active"],
    )


def downgrade() -> None:
    """Drop the timeline schema."""
    op.drop_index("idx_config_parent_active", table_name="child_configuration")
    op.drop_table("child_configuration")
    op.drop_index("idx_history_changed_at", table_name="field_history")
    op.drop_index("idx_history_record_date", table_name="field_history")
    op.drop_index("idx_history_record", table_name="field_history")
    op.drop_table("field_history")
    op.drop_index("idx_lookup_target", table_name="record_lookup")
    op.drop_table("record_lookup")
    op.drop_index("idx_record_created", table_name="tracked_record")
    op.drop_index("idx_record_object", table_name="tracked_record")
    op.drop_table("tracked_record")
    op.drop_index("idx_relationship_parent", table_name="object_relationship")
    op.drop_table("object_relationship")
    op.drop_table("object_type")
