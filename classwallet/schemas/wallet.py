"""
Pydantic schemas for wallet operations.

Request amounts are magnitudes: the service applies the sign
for fines and purchases. Adjustments are the only requests
that carry their own sign.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from classwallet.models.enums import TransactionType, SyncStatus
from classwallet.schemas.student import StudentResponse


# --- Request Schemas ---

class RewardRequest(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=2)
    category: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class FineRequest(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=2)
    category: str | None = Field(default=None, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class PurchaseRequest(BaseModel):
    amount: Decimal = Field(gt=0, decimal_places=2)
    item: str = Field(min_length=1, max_length=500)
    notes: str | None = Field(default=None, max_length=1000)


class AdjustmentRequest(BaseModel):
    """
    A manual correction by a teacher.

    When teacher_name is omitted the logged-in teacher is recorded.
    """
    amount: Decimal = Field(decimal_places=2)
    reason: str = Field(min_length=1, max_length=500)
    teacher_name: str | None = Field(default=None, max_length=200)

    @field_validator("amount")
    @classmethod
    def amount_must_be_nonzero(cls, v: Decimal) -> Decimal:
        if v == 0:
            raise ValueError("adjustment amount must not be zero")
        return v


class WalletTransactionUpdate(BaseModel):
    """Only descriptive fields can change after a transaction is recorded."""
    description: str | None = Field(default=None, max_length=500)
    category: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=1000)
    approved: bool | None = None


# --- Response Schemas ---

class WalletTransactionResponse(BaseModel):
    id: int
    student_id: int
    transaction_type: TransactionType
    amount: Decimal
    balance_after: Decimal
    category: str | None
    description: str | None
    notes: str | None
    teacher_name: str | None
    transaction_date: date
    approved: bool
    sync_status: SyncStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class StudentBalanceResponse(BaseModel):
    student: StudentResponse
    balance: Decimal


class StudentTotalsResponse(BaseModel):
    student_id: int
    balance: Decimal
    total_earned: Decimal
    total_spent: Decimal


class ClassStatisticsResponse(BaseModel):
    total_awarded: Decimal
    total_spent: Decimal
    total_transactions: int
    active_student_count: int
