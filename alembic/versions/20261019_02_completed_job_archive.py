"""completed job archive and invoices

Revision ID: 20261019_02
Revises: 20261019_01
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_02"
down_revision = "20261019_01"
branch_labels = None
depends_on = None

ARCHIVE_CHILD_TABLES = (
    "completed_job_notes",
    "completed_job_charges",
    "completed_job_hours",
    "completed_job_parts",
    "completed_job_photos",
    "completed_job_equipment",
)


def _create_enum(name: str, *values: str) -> sa.Enum:
    enum_type = sa.Enum(*values, name=name)
    enum_type.create(op.get_bind(), checkfirst=True)
    return enum_type


def _drop_enum(name: str) -> None:
    bind = op.get_bind()
    if bind.dialect.name != "sqlite":
        sa.Enum(name=name).drop(bind, checkfirst=True)


def _archive_child(name: str, *columns: sa.Column) -> None:
    op.create_table(
        name,
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "completed_job_id",
            sa.Uuid(),
            sa.ForeignKey("completed_jobs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("original_job_id", sa.Uuid(), nullable=False),
        sa.Column("org_id", sa.Uuid(), nullable=False),
        *columns,
        # Copied from the live row, never defaulted.
        sa.Column("created_at", sa.DateTime(), nullable=True),
    )
    op.create_index(f"ix_{name}_completed_job_id", name, ["completed_job_id"])
    op.create_index(f"ix_{name}_org_id", name, ["org_id"])


def upgrade() -> None:
    op.create_table(
        "completed_jobs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("org_id", sa.Uuid(), nullable=False),
        sa.Column("original_job_id", sa.Uuid(), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=True),
        sa.Column("customer_name", sa.String(length=255), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("job_type", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("completed_by", sa.String(length=64), nullable=True),
        sa.Column("original_created_by", sa.String(length=64), nullable=True),
        sa.Column("original_created_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_completed_jobs_org_completed_at", "completed_jobs", ["org_id", "completed_at"])
    op.create_index("ix_completed_jobs_original_job_id", "completed_jobs", ["original_job_id"])
    op.create_index("ix_completed_jobs_org_customer", "completed_jobs", ["org_id", "customer_id"])

    _archive_child("completed_job_notes", sa.Column("text", sa.Text(), nullable=False))
    _archive_child(
        "completed_job_charges",
        sa.Column("kind", sa.String(length=50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Numeric(10, 2), nullable=False),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("total", sa.Numeric(10, 2), nullable=False),
    )
    _archive_child(
        "completed_job_hours",
        sa.Column("hours", sa.Numeric(4, 1), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
    )
    _archive_child(
        "completed_job_parts",
        sa.Column("part_name", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
    )
    _archive_child("completed_job_photos", sa.Column("url", sa.Text(), nullable=False))
    _archive_child(
        "completed_job_equipment",
        sa.Column("equipment_id", sa.Uuid(), nullable=False),
        sa.Column("equipment_name", sa.String(length=255), nullable=True),
    )
    for name in ARCHIVE_CHILD_TABLES:
        if name != "completed_job_equipment":
            op.create_index(f"ix_{name}_original_job_id", name, ["original_job_id"])
    op.create_index(
        "ix_completed_job_equipment_equipment_id", "completed_job_equipment", ["equipment_id"]
    )

    invoice_status_enum = _create_enum("invoice_status", "draft", "sent", "paid")
    invoice_source_type_enum = _create_enum("invoice_source_type", "charge", "hours", "part")

    op.create_table(
        "invoices",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("org_id", sa.Uuid(), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=True),
        sa.Column(
            "completed_job_id",
            sa.Uuid(),
            sa.ForeignKey("completed_jobs.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("original_job_id", sa.Uuid(), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("status", invoice_status_enum, nullable=False, server_default="draft"),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="AUD"),
        sa.Column("sub_total", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("tax_total", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("grand_total", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("org_id", "original_job_id", name="uq_invoices_org_original_job"),
    )
    op.create_index("ix_invoices_org_status", "invoices", ["org_id", "status"])

    op.create_table(
        "invoice_lines",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("org_id", sa.Uuid(), nullable=False),
        sa.Column("invoice_id", sa.Uuid(), sa.ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("source_type", invoice_source_type_enum, nullable=False),
        sa.Column("source_id", sa.Uuid(), nullable=True),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 2), nullable=False, server_default="1"),
        sa.Column("unit_amount", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("tax_rate", sa.Numeric(5, 2), nullable=False, server_default="0"),
        sa.Column("line_total", sa.Numeric(12, 2), nullable=False, server_default="0"),
    )
    op.create_index("ix_invoice_lines_invoice_id", "invoice_lines", ["invoice_id"])


def downgrade() -> None:
    op.drop_index("ix_invoice_lines_invoice_id", table_name="invoice_lines")
    op.drop_table("invoice_lines")
    op.drop_index("ix_invoices_org_status", table_name="invoices")
    op.drop_table("invoices")
    _drop_enum("invoice_source_type")
    _drop_enum("invoice_status")
    for name in reversed(ARCHIVE_CHILD_TABLES):
        op.drop_table(name)
    op.drop_table("completed_jobs")
