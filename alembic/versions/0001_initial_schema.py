"""initial schema: audits, auditors, areas, credentials

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "audits",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=True),
        sa.Column("area", sa.String(length=255), nullable=False),
        sa.Column("auditor", sa.String(length=255), nullable=False),
        sa.Column("audit_date", sa.Date(), nullable=True),
        sa.Column("risk_type", sa.String(length=255), nullable=False),
        sa.Column("potential", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("responsible", sa.String(length=255), nullable=False),
        sa.Column("deadline", sa.Date(), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False),
        sa.Column("action_description", sa.Text(), nullable=False),
        sa.Column("photos", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    for column in ("id", "timestamp", "area", "auditor", "audit_date", "risk_type", "potential", "status"):
        op.create_index(f"ix_audits_{column}", "audits", [column])

    op.create_table(
        "auditors",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_auditors_id", "auditors", ["id"])
    op.create_index("ix_auditors_name", "auditors", ["name"], unique=True)

    op.create_table(
        "areas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False, unique=True),
    )
    op.create_index("ix_areas_id", "areas", ["id"])

    op.create_table(
        "credentials",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("value", sa.String(length=255), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("credentials")
    op.drop_index("ix_areas_id", table_name="areas")
    op.drop_table("areas")
    op.drop_index("ix_auditors_name", table_name="auditors")
    op.drop_index("ix_auditors_id", table_name="auditors")
    op.drop_table("auditors")
    for column in ("id", "timestamp", "area", "auditor", "audit_date", "risk_type", "potential", "status"):
        op.drop_index(f"ix_audits_{column}", table_name="audits")
    op.drop_table("audits")
