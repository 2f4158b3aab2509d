"""
Wallet transaction model.

One row per reward, fine, purchase or adjustment. Amounts are
stored signed, so summing a student's rows in creation order
reconstructs the balance. balance_after is a denormalized
snapshot of that running sum; the row with the highest id for
a student holds the current balance.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, Date, DateTime, Numeric, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from classwallet.models.base import Base
from classwallet.models.enums import TransactionType, SyncStatus


class WalletTransaction(Base):
    __tablename__ = "class_wallet_transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id"), nullable=False, index=True
    )
    transaction_type: Mapped[TransactionType] = mapped_column(
        SAEnum(
            TransactionType,
            name="transaction_type_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False
    )
    balance_after: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False
    )
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    description: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    teacher_name: Mapped[str | None] = mapped_column(
        String(200), nullable=True
    )
    transaction_date: Mapped[date] = mapped_column(
        Date, nullable=False, default=date.today, index=True
    )
    approved: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    sync_status: Mapped[SyncStatus] = mapped_column(
        SAEnum(
            SyncStatus,
            name="sync_status_enum",
            create_constraint=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=SyncStatus.PENDING,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    student: Mapped["Student"] = relationship(back_populates="transactions")

    @property
    def is_credit(self) -> bool:
        return self.amount is not None and self.amount > 0

    @property
    def is_debit(self) -> bool:
        return self.amount is not None and self.amount < 0

    @property
    def formatted_amount(self) -> str:
        if self.amount is None:
            return "$0.00"
        return f"${abs(self.amount):.2f}"

    @property
    def display_string(self) -> str:
        sign = "+" if self.is_credit else "-"
        return f"{sign}{self.formatted_amount}: {self.description or 'No description'}"

    def __repr__(self) -> str:
        return (
            f"<WalletTransaction {self.transaction_type.value} "
            f"{self.amount} -> {self.balance_after}>"
        )
