"""Create remark, bottom-up quantification and audit tables.

Revision ID: 20261017_create_buq_tables
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261017_create_buq_tables"
down_revision = None
branch_labels = None
depends_on = None


def _identity_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
    ]


def _child_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "bottom_up_quantification_id",
            sa.Uuid(),
            sa.ForeignKey("bottom_up_quantifications.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "remarks",
        *_identity_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )

    op.create_table(
        "bottom_up_quantifications",
        *_identity_columns(),
        sa.Column("facility_id", sa.Uuid(), nullable=False),
        sa.Column("program_id", sa.Uuid(), nullable=False),
        sa.Column("processing_period_id", sa.Uuid(), nullable=False),
        sa.Column("target_year", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("created_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("modified_date", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "IDX_buq_facility_program_period",
        "bottom_up_quantifications",
        ["facility_id", "program_id", "processing_period_id"],
    )
    op.create_index("IDX_buq_status", "bottom_up_quantifications", ["status"])

    op.create_table(
        "bottom_up_quantification_line_items",
        *_child_columns(),
        sa.Column("orderable_id", sa.Uuid(), nullable=False),
        sa.Column("annual_adjusted_consumption", sa.Integer(), nullable=True),
        sa.Column("verified_annual_adjusted_consumption", sa.Integer(), nullable=True),
        sa.Column("forecasted_demand", sa.Integer(), nullable=True),
        sa.Column(
            "remark_id",
            sa.Uuid(),
            sa.ForeignKey("remarks.id", ondelete="SET NULL"),
            nullable=True,
        ),
    )
    op.create_index(
        "IDX_buq_line_items_parent",
        "bottom_up_quantification_line_items",
        ["bottom_up_quantification_id", "position"],
    )

    op.create_table(
        "bottom_up_quantification_status_changes",
        *_child_columns(),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=True),
        sa.Column("occurred_date", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "audit_log_entries",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("commit_id", sa.Uuid(), nullable=False),
        sa.Column("entity_type", sa.String(length=64), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=False),
        sa.Column("commit_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("property_name", sa.String(length=128), nullable=False),
        sa.Column("left_value", sa.JSON(), nullable=True),
        sa.Column("right_value", sa.JSON(), nullable=True),
    )
    op.create_index(
        "IDX_audit_entity", "audit_log_entries", ["entity_type", "entity_id"]
    )


def downgrade() -> None:
    op.drop_index("IDX_audit_entity", table_name="audit_log_entries")
    op.drop_table("audit_log_entries")

    op.drop_table("bottom_up_quantification_status_changes")

    op.drop_index(
        "IDX_buq_line_items_parent", table_name="bottom_up_quantification_line_items"
    )
    op.drop_table("bottom_up_quantification_line_items")

    op.drop_index("IDX_buq_status", table_name="bottom_up_quantifications")
    op.drop_index(
        "IDX_buq_facility_program_period", table_name="bottom_up_quantifications"
    )
    op.drop_table("bottom_up_quantifications")

    op.drop_table("remarks")
