"""field service core tables

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_01"
down_revision = None
branch_labels = None
depends_on = None


def _job_child(name: str, *columns: sa.Column) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("job_id", sa.Uuid(), sa.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False),
        sa.Column("org_id", sa.Uuid(), nullable=False),
        *columns,
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(f"ix_{name}_job_org", name, ["job_id", "org_id"])


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("org_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_customers_org_id", "customers", ["org_id"])
    op.create_index("ix_customers_org_name", "customers", ["org_id", "name"])

    op.create_table(
        "equipment",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("org_id", sa.Uuid(), nullable=False),
        sa.Column(
            "customer_id", sa.Uuid(), sa.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("make", sa.String(length=255), nullable=True),
        sa.Column("model", sa.String(length=255), nullable=True),
        sa.Column("serial", sa.String(length=255), nullable=True),
        sa.Column("service_interval_months", sa.Integer(), nullable=True),
        sa.Column("last_service_date", sa.Date(), nullable=True),
        sa.Column("next_service_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "service_interval_months IS NULL OR service_interval_months > 0",
            name="ck_equipment_service_interval_positive",
        ),
    )
    op.create_index("ix_equipment_org_id", "equipment", ["org_id"])
    op.create_index("ix_equipment_org_customer", "equipment", ["org_id", "customer_id"])

    op.create_table(
        "jobs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("org_id", sa.Uuid(), nullable=False),
        sa.Column(
            "customer_id", sa.Uuid(), sa.ForeignKey("customers.id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("job_type", sa.String(length=50), nullable=True),
        sa.Column("status", sa.String(length=50), nullable=False, server_default="new"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(), nullable=True),
        sa.Column("created_by", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column(
            "updated_at",
            sa.DateTime(),
            nullable=False,
            server_default=sa.func.now(),
            onupdate=sa.func.now(),
        ),
        sa.CheckConstraint("title <> ''", name="ck_jobs_title_nonempty"),
    )
    op.create_index("ix_jobs_org_id", "jobs", ["org_id"])
    op.create_index("ix_jobs_customer_id", "jobs", ["customer_id"])
    op.create_index("ix_jobs_org_scheduled_at", "jobs", ["org_id", "scheduled_at"])
    op.create_index("ix_jobs_org_status", "jobs", ["org_id", "status"])

    _job_child("job_notes", sa.Column("text", sa.Text(), nullable=False))
    _job_child(
        "job_charges",
        sa.Column("kind", sa.String(length=50), nullable=False, server_default="labour"),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=False, server_default="1"),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("total", sa.Numeric(10, 2), nullable=False, server_default="0"),
    )
    op.create_index("ix_job_charges_kind", "job_charges", ["kind"])
    _job_child(
        "job_hours",
        sa.Column("hours", sa.Numeric(4, 1), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.CheckConstraint("hours >= 0", name="ck_job_hours_nonnegative"),
    )
    _job_child(
        "job_parts",
        sa.Column("part_name", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="1"),
        sa.CheckConstraint("quantity > 0", name="ck_job_parts_quantity_positive"),
    )
    _job_child("job_photos", sa.Column("url", sa.Text(), nullable=False))
    _job_child(
        "job_equipment",
        sa.Column(
            "equipment_id", sa.Uuid(), sa.ForeignKey("equipment.id", ondelete="CASCADE"), nullable=False
        ),
    )
    op.create_index("ix_job_equipment_equipment_id", "job_equipment", ["equipment_id"])

    op.create_table(
        "item_presets",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("org_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("unit_amount", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("tax_rate", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("org_id", "name", name="uq_item_presets_org_name"),
    )


def downgrade() -> None:
    op.drop_table("item_presets")
    for name in ("job_equipment", "job_photos", "job_parts", "job_hours", "job_charges", "job_notes"):
        op.drop_table(name)
    op.drop_table("jobs")
    op.drop_table("equipment")
    op.drop_table("customers")
