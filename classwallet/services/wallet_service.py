"""
Wallet service: the classroom economy ledger.

This service enforces the ledger rules:
1. Every transaction stores a signed amount; fines and
   purchases are negated here, never by the caller
2. balance_after = previous snapshot for the student + amount
3. A purchase never drives a balance below zero
4. Balance changes for one student are serialized

No other code writes wallet transactions directly.
"""

from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from classwallet.logging_setup import get_logger
from classwallet.models.enums import TransactionType, SyncStatus
from classwallet.models.student import Student
from classwallet.models.wallet_transaction import WalletTransaction
from classwallet.schemas.wallet import WalletTransactionUpdate
from classwallet.services.concurrency import (
    StudentLocks,
    student_locks,
    lock_for_update,
)
from classwallet.services.errors import NotFoundError, InsufficientBalanceError
from classwallet.services.student_directory import StudentDirectory

logger = get_logger(__name__)

STORE_CATEGORY = "Store"
ADJUSTMENT_CATEGORY = "Manual"

ZERO = Decimal("0")


def _to_decimal(value) -> Decimal:
    return Decimal(str(value))


class WalletService:
    """
    All wallet operations pass through this service.

    Balance-changing operations commit their own work while
    holding the student's lock, so a concurrent writer always
    reads the snapshot written before it. Failed writes are
    rolled back and the error re-raised.
    """

    def __init__(self, db: Session, locks: StudentLocks | None = None):
        self.db = db
        self.students = StudentDirectory(db)
        self.locks = locks or student_locks

    # --- Recording ---

    def record_reward(
        self, student_id: int, amount, category: str | None = None,
        description: str | None = None,
    ) -> WalletTransaction:
        """Award points. Stored as given."""
        amount = _to_decimal(amount)
        return self._record(
            student_id, TransactionType.REWARD, amount,
            category=category, description=description,
        )

    def record_fine(
        self, student_id: int, amount, category: str | None = None,
        description: str | None = None,
    ) -> WalletTransaction:
        """
        Deduct points. Stored negative.

        There is no floor: a negative balance is a disciplinary signal.
        """
        amount = _to_decimal(amount)
        return self._record(
            student_id, TransactionType.FINE, -amount,
            category=category, description=description,
        )

    def record_purchase(
        self, student_id: int, amount, item: str,
        notes: str | None = None,
    ) -> WalletTransaction:
        """
        Spend points at the class store. Stored negative.

        Raises InsufficientBalanceError, with nothing written, if the
        student cannot afford the item.
        """
        amount = _to_decimal(amount)
        return self._record(
            student_id, TransactionType.PURCHASE, -amount,
            category=STORE_CATEGORY, description=item, notes=notes,
            require_funds=True,
        )

    def record_adjustment(
        self, student_id: int, amount, reason: str,
        teacher_name: str | None = None,
    ) -> WalletTransaction:
        """Manual correction. The caller chooses the sign."""
        amount = _to_decimal(amount)
        return self._record(
            student_id, TransactionType.ADJUSTMENT, amount,
            category=ADJUSTMENT_CATEGORY, description=reason,
            teacher_name=teacher_name,
        )

    def _lock_student(self, student_id: int) -> Student:
        student = self.db.execute(
            lock_for_update(select(Student).where(Student.id == student_id))
        ).scalar_one_or_none()
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def _record(
        self,
        student_id: int,
        transaction_type: TransactionType,
        signed_amount: Decimal,
        *,
        category: str | None,
        description: str | None,
        notes: str | None = None,
        teacher_name: str | None = None,
        require_funds: bool = False,
    ) -> WalletTransaction:
        with self.locks.hold(student_id):
            try:
                student = self._lock_student(student_id)
                current = self.get_current_balance(student_id)

                if require_funds and current < -signed_amount:
                    raise InsufficientBalanceError(current, -signed_amount)

                txn = WalletTransaction(
                    student_id=student.id,
                    transaction_type=transaction_type,
                    amount=signed_amount,
                    balance_after=current + signed_amount,
                    category=category,
                    description=description,
                    notes=notes,
                    teacher_name=teacher_name,
                    transaction_date=date.today(),
                    approved=True,
                    sync_status=SyncStatus.PENDING,
                )
                self.db.add(txn)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        logger.info(
            "Recorded %s of %s for student %s (balance %s)",
            transaction_type.value, signed_amount,
            student.full_name, txn.balance_after,
        )
        return txn

    # --- Balance Queries ---

    def get_current_balance(self, student_id: int) -> Decimal:
        """
        The balance_after of the student's newest transaction.

        Creation order is the id, not transaction_date, so several
        transactions on the same day still order correctly.
        Zero when the student has no transactions.
        """
        balance = self.db.execute(
            select(WalletTransaction.balance_after)
            .where(WalletTransaction.student_id == student_id)
            .order_by(WalletTransaction.id.desc())
            .limit(1)
        ).scalar_one_or_none()

        if balance is None:
            return ZERO
        return _to_decimal(balance)

    def recompute_balance(self, student_id: int) -> Decimal:
        """Re-sum the full history. Must match get_current_balance()."""
        total = self.db.execute(
            select(func.coalesce(func.sum(WalletTransaction.amount), 0))
            .where(WalletTransaction.student_id == student_id)
        ).scalar()
        return _to_decimal(total)

    def get_all_student_balances(self) -> dict[Student, Decimal]:
        """Current balance of every active student, in roster order."""
        return {
            student: self.get_current_balance(student.id)
            for student in self.students.find_active()
        }

    def get_top_earners(self, limit: int) -> list[dict]:
        """
        Highest balances first.

        Equal balances are ordered by student id so the ranking is
        stable between calls.
        """
        if limit < 0:
            raise ValueError(f"limit must not be negative, got {limit}")
        ranked = sorted(
            self.get_all_student_balances().items(),
            key=lambda item: (-item[1], item[0].id),
        )
        return [
            {"student": student, "balance": balance}
            for student, balance in ranked[:limit]
        ]

    # --- Transaction History ---

    def _newest_first(self, stmt):
        return list(self.db.execute(
            stmt.order_by(
                WalletTransaction.transaction_date.desc(),
                WalletTransaction.id.desc(),
            )
        ).scalars().all())

    def get_all_transactions(self) -> list[WalletTransaction]:
        return list(self.db.execute(
            select(WalletTransaction).order_by(WalletTransaction.id)
        ).scalars().all())

    def get_transaction(self, transaction_id: int) -> WalletTransaction:
        txn = self.db.get(WalletTransaction, transaction_id)
        if not txn:
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return txn

    def get_student_transactions(self, student_id: int) -> list[WalletTransaction]:
        return self._newest_first(
            select(WalletTransaction)
            .where(WalletTransaction.student_id == student_id)
        )

    def get_recent_transactions(self, days: int) -> list[WalletTransaction]:
        """Transactions dated within the last `days` days, for all students."""
        since = date.today() - timedelta(days=days)
        return self._newest_first(
            select(WalletTransaction)
            .where(WalletTransaction.transaction_date >= since)
        )

    def get_transactions_by_type(self, transaction_type) -> list[WalletTransaction]:
        return self._newest_first(
            select(WalletTransaction).where(
                WalletTransaction.transaction_type
                == TransactionType(transaction_type)
            )
        )

    def get_transactions_by_category(self, category: str) -> list[WalletTransaction]:
        return self._newest_first(
            select(WalletTransaction)
            .where(WalletTransaction.category == category)
        )

    def get_transactions_by_date_range(
        self, start_date: date, end_date: date
    ) -> list[WalletTransaction]:
        """Both ends inclusive."""
        return self._newest_first(
            select(WalletTransaction).where(
                WalletTransaction.transaction_date.between(start_date, end_date)
            )
        )

    def get_unapproved_transactions(self) -> list[WalletTransaction]:
        return self._newest_first(
            select(WalletTransaction)
            .where(WalletTransaction.approved.is_(False))
        )

    def count_by_type_and_date_range(
        self, transaction_type, start_date: date, end_date: date
    ) -> int:
        return self.db.execute(
            select(func.count(WalletTransaction.id)).where(
                WalletTransaction.transaction_type
                == TransactionType(transaction_type),
                WalletTransaction.transaction_date.between(start_date, end_date),
            )
        ).scalar_one()

    # --- Statistics ---

    def get_total_earned(self, student_id: int) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(WalletTransaction.amount), 0)).where(
                WalletTransaction.student_id == student_id,
                WalletTransaction.amount > 0,
            )
        ).scalar()
        return _to_decimal(total)

    def get_total_spent(self, student_id: int) -> Decimal:
        """Sum of all debits, returned as a positive number."""
        total = self.db.execute(
            select(func.coalesce(func.sum(WalletTransaction.amount), 0)).where(
                WalletTransaction.student_id == student_id,
                WalletTransaction.amount < 0,
            )
        ).scalar()
        return abs(_to_decimal(total))

    def get_class_statistics(self) -> dict:
        """
        Totals across every transaction.

        This scans the whole table and is meant for occasional
        administrative views.
        """
        amounts = [_to_decimal(t.amount) for t in self.get_all_transactions()]
        return {
            "total_awarded": sum((a for a in amounts if a > 0), ZERO),
            "total_spent": sum((-a for a in amounts if a < 0), ZERO),
            "total_transactions": len(amounts),
            "active_student_count": self.students.count_active(),
        }

    # --- Corrections ---

    def update_transaction(
        self, transaction_id: int, patch: WalletTransactionUpdate
    ) -> WalletTransaction:
        """
        Change descriptive fields of a transaction.

        Only fields present in the patch are written. Amount and
        balance_after are not part of the patch, so snapshots
        cannot go stale through this path. A change that alters a
        field puts the transaction back in the sync queue.
        """
        txn = self.get_transaction(transaction_id)
        changed = False
        for field, value in patch.model_dump(exclude_unset=True).items():
            if getattr(txn, field) != value:
                setattr(txn, field, value)
                changed = True
        if changed:
            txn.sync_status = SyncStatus.PENDING
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return txn

    def delete_transaction(self, transaction_id: int) -> None:
        """
        Remove a transaction and repair later snapshots.

        Every newer transaction of the same student has its
        balance_after recomputed in the same commit, so the
        running balance stays consistent and is queued for sync
        again. Unknown ids are ignored.
        """
        txn = self.db.get(WalletTransaction, transaction_id)
        if not txn:
            logger.debug("Transaction %s already absent", transaction_id)
            return

        student_id = txn.student_id
        with self.locks.hold(student_id):
            try:
                self._lock_student(student_id)
                # Another writer may have deleted it while we waited
                txn = self.db.execute(
                    select(WalletTransaction)
                    .where(WalletTransaction.id == transaction_id)
                ).scalar_one_or_none()
                if txn is None:
                    logger.debug("Transaction %s already absent", transaction_id)
                    return
                self.db.delete(txn)
                self.db.flush()
                repaired = self._rebuild_snapshots(student_id, transaction_id)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        logger.info(
            "Deleted transaction %s, repaired %d later snapshots",
            transaction_id, repaired,
        )

    def _rebuild_snapshots(self, student_id: int, after_id: int) -> int:
        previous = self.db.execute(
            select(WalletTransaction.balance_after)
            .where(
                WalletTransaction.student_id == student_id,
                WalletTransaction.id < after_id,
            )
            .order_by(WalletTransaction.id.desc())
            .limit(1)
        ).scalar_one_or_none()
        running = ZERO if previous is None else _to_decimal(previous)

        later = self.db.execute(
            select(WalletTransaction)
            .where(
                WalletTransaction.student_id == student_id,
                WalletTransaction.id > after_id,
            )
            .order_by(WalletTransaction.id)
        ).scalars().all()

        for entry in later:
            running += _to_decimal(entry.amount)
            entry.balance_after = running
            entry.sync_status = SyncStatus.PENDING
        return len(later)

    # --- Sync Support ---

    def get_transactions_needing_sync(self) -> list[WalletTransaction]:
        return list(self.db.execute(
            select(WalletTransaction)
            .where(WalletTransaction.sync_status == SyncStatus.PENDING)
            .order_by(WalletTransaction.id)
        ).scalars().all())

    def mark_synced(self, transaction_id: int) -> WalletTransaction | None:
        """Flip a transaction to synced. Unknown ids are a no-op."""
        txn = self.db.get(WalletTransaction, transaction_id)
        if not txn:
            return None
        txn.sync_status = SyncStatus.SYNCED
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info("Marked transaction %s synced", transaction_id)
        return txn
