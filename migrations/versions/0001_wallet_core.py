"""Students, teachers and wallet transactions.

Revision ID: 0001_wallet_core
Revises: None
Create Date: 2026-10-18
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_wallet_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "students",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("student_id", sa.String(50), nullable=False, unique=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("grade_level", sa.Integer(), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "teachers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("employee_id", sa.String(50), nullable=False, unique=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "class_wallet_transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "student_id",
            sa.Integer(),
            sa.ForeignKey("students.id"),
            nullable=False,
        ),
        sa.Column(
            "transaction_type",
            sa.Enum(
                "REWARD", "FINE", "PURCHASE", "ADJUSTMENT",
                name="transaction_type_enum",
                create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("balance_after", sa.Numeric(10, 2), nullable=False),
        sa.Column("category", sa.String(100), nullable=True),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("notes", sa.String(1000), nullable=True),
        sa.Column("teacher_name", sa.String(200), nullable=True),
        sa.Column("transaction_date", sa.Date(), nullable=False),
        sa.Column("approved", sa.Boolean(), nullable=False),
        sa.Column(
            "sync_status",
            sa.Enum(
                "pending", "synced",
                name="sync_status_enum",
                create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_class_wallet_transactions_student_id",
        "class_wallet_transactions",
        ["student_id"],
    )
    op.create_index(
        "ix_class_wallet_transactions_transaction_date",
        "class_wallet_transactions",
        ["transaction_date"],
    )
    op.create_index(
        "ix_class_wallet_transactions_sync_status",
        "class_wallet_transactions",
        ["sync_status"],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_class_wallet_transactions_sync_status",
        table_name="class_wallet_transactions",
    )
    op.drop_index(
        "ix_class_wallet_transactions_transaction_date",
        table_name="class_wallet_transactions",
    )
    op.drop_index(
        "ix_class_wallet_transactions_student_id",
        table_name="class_wallet_transactions",
    )
    op.drop_table("class_wallet_transactions")
    op.drop_table("teachers")
    op.drop_table("students")
    sa.Enum(name="sync_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="transaction_type_enum").drop(op.get_bind(), checkfirst=True)
