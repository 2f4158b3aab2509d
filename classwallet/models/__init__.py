"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from classwallet.models.base import Base
from classwallet.models.enums import TransactionType, SyncStatus
from classwallet.models.student import Student
from classwallet.models.teacher import Teacher
from classwallet.models.wallet_transaction import WalletTransaction

__all__ = [
    "Base",
    "TransactionType",
    "SyncStatus",
    "Student",
    "Teacher",
    "WalletTransaction",
]
