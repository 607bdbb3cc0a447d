"""Initial schema: transports and loans.

Revision ID: 001
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ── transports ────────────────────────────────────────────────────
    op.create_table(
        "transports",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("code", sa.String(32), unique=True, nullable=False),
        sa.Column(
            "transport_type",
            sa.Enum(
                "bicycle", "scooter", "electric_scooter", name="transporttype"
            ),
            nullable=False,
        ),
        sa.Column("is_available", sa.Boolean, default=True, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_transports_available", "transports", ["is_available"])

    # ── loans ─────────────────────────────────────────────────────────
    op.create_table(
        "loans",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column(
            "transport_id",
            sa.String(36),
            sa.ForeignKey("transports.id"),
            nullable=False,
        ),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cost", sa.Float, default=0.0, nullable=False),
        sa.Column(
            "status",
            sa.Enum("ACTIVE", "COMPLETED", "CANCELLED", name="loanstatus"),
            default="ACTIVE",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_loans_status", "loans", ["status"])
    op.create_index("idx_loans_user", "loans", ["user_id"])
    op.create_index("idx_loans_transport", "loans", ["transport_id"])
    op.create_index(
        "uq_loans_user_active",
        "loans",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("status = 'ACTIVE'"),
    )


def downgrade() -> None:
    op.drop_table("loans")
    op.drop_table("transports")
    op.execute("DROP TYPE IF EXISTS loanstatus")
    op.execute("DROP TYPE IF EXISTS transporttype")
