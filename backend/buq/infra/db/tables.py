"""SQLAlchemy Core table definitions for the BUQ schema."""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    Uuid,
)

metadata = MetaData()

remarks = Table(
    "remarks",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("version", Integer, nullable=False, default=0),
    Column("name", String(255), nullable=False),
    Column("description", Text, nullable=True),
)

bottom_up_quantifications = Table(
    "bottom_up_quantifications",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("version", Integer, nullable=False, default=0),
    Column("facility_id", Uuid, nullable=False),
    Column("program_id", Uuid, nullable=False),
    Column("processing_period_id", Uuid, nullable=False),
    Column("target_year", Integer, nullable=True),
    Column("status", String(32), nullable=False),
    Column("created_date", DateTime(timezone=True), nullable=True),
    Column("modified_date", DateTime(timezone=True), nullable=True),
    Index("IDX_buq_facility_program_period", "facility_id", "program_id", "processing_period_id"),
    Index("IDX_buq_status", "status"),
)

line_items = Table(
    "bottom_up_quantification_line_items",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column(
        "bottom_up_quantification_id",
        Uuid,
        ForeignKey("bottom_up_quantifications.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("position", Integer, nullable=False),
    Column("orderable_id", Uuid, nullable=False),
    Column("annual_adjusted_consumption", Integer, nullable=True),
    Column("verified_annual_adjusted_consumption", Integer, nullable=True),
    Column("forecasted_demand", Integer, nullable=True),
    Column(
        "remark_id",
        Uuid,
        ForeignKey("remarks.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Index("IDX_buq_line_items_parent", "bottom_up_quantification_id", "position"),
)

status_changes = Table(
    "bottom_up_quantification_status_changes",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column(
        "bottom_up_quantification_id",
        Uuid,
        ForeignKey("bottom_up_quantifications.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("position", Integer, nullable=False),
    Column("status", String(32), nullable=False),
    Column("author", String(255), nullable=True),
    Column("occurred_date", DateTime(timezone=True), nullable=False),
)

audit_log_entries = Table(
    "audit_log_entries",
    metadata,
    Column("id", Uuid, primary_key=True),
    Column("commit_id", Uuid, nullable=False),
    Column("entity_type", String(64), nullable=False),
    Column("entity_id", Uuid, nullable=False),
    Column("author", String(255), nullable=False),
    Column("commit_date", DateTime(timezone=True), nullable=False),
    Column("property_name", String(128), nullable=False),
    Column("left_value", JSON, nullable=True),
    Column("right_value", JSON, nullable=True),
    Index("IDX_audit_entity", "entity_type", "entity_id"),
)
