"""
Wallet API endpoints.

The API layer is thin: it handles HTTP concerns (status codes,
response formatting) and delegates all business logic to the
WalletService, which commits its own balance changes.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from classwallet.models.base import get_db
from classwallet.models.enums import TransactionType
from classwallet.services.errors import NotFoundError, SessionRequiredError
from classwallet.services.session_manager import session_manager
from classwallet.services.wallet_service import WalletService
from classwallet.schemas.student import StudentResponse
from classwallet.schemas.wallet import (
    RewardRequest,
    FineRequest,
    PurchaseRequest,
    AdjustmentRequest,
    WalletTransactionUpdate,
    WalletTransactionResponse,
    StudentBalanceResponse,
    StudentTotalsResponse,
    ClassStatisticsResponse,
)

router = APIRouter(prefix="/wallet", tags=["Wallet"])


def _http_error(e: ValueError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


# --- Recording ---

@router.post(
    "/students/{student_id}/rewards",
    response_model=WalletTransactionResponse,
    status_code=201,
)
def record_reward(
    student_id: int,
    request: RewardRequest,
    db: Session = Depends(get_db),
):
    service = WalletService(db)
    try:
        return service.record_reward(
            student_id, request.amount, request.category, request.description
        )
    except ValueError as e:
        raise _http_error(e)


@router.post(
    "/students/{student_id}/fines",
    response_model=WalletTransactionResponse,
    status_code=201,
)
def record_fine(
    student_id: int,
    request: FineRequest,
    db: Session = Depends(get_db),
):
    service = WalletService(db)
    try:
        return service.record_fine(
            student_id, request.amount, request.category, request.description
        )
    except ValueError as e:
        raise _http_error(e)


@router.post(
    "/students/{student_id}/purchases",
    response_model=WalletTransactionResponse,
    status_code=201,
)
def record_purchase(
    student_id: int,
    request: PurchaseRequest,
    db: Session = Depends(get_db),
):
    """Spend points at the class store. Rejected if the balance is too low."""
    service = WalletService(db)
    try:
        return service.record_purchase(
            student_id, request.amount, request.item, request.notes
        )
    except ValueError as e:
        raise _http_error(e)


@router.post(
    "/students/{student_id}/adjustments",
    response_model=WalletTransactionResponse,
    status_code=201,
)
def record_adjustment(
    student_id: int,
    request: AdjustmentRequest,
    db: Session = Depends(get_db),
):
    """
    Manual correction.

    Without an explicit teacher_name the adjustment is attributed
    to the logged-in teacher.
    """
    teacher_name = request.teacher_name
    if teacher_name is None and session_manager.is_logged_in():
        teacher_name = session_manager.current_teacher_name

    service = WalletService(db)
    try:
        return service.record_adjustment(
            student_id, request.amount, request.reason, teacher_name
        )
    except ValueError as e:
        raise _http_error(e)


# --- Balances ---

@router.get("/students/{student_id}/balance", response_model=StudentTotalsResponse)
def get_student_balance(
    student_id: int,
    db: Session = Depends(get_db),
):
    """Current balance plus lifetime earned and spent."""
    service = WalletService(db)
    try:
        service.students.find_by_id(student_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return StudentTotalsResponse(
        student_id=student_id,
        balance=service.get_current_balance(student_id),
        total_earned=service.get_total_earned(student_id),
        total_spent=service.get_total_spent(student_id),
    )


@router.get(
    "/students/{student_id}/transactions",
    response_model=list[WalletTransactionResponse],
)
def get_student_transactions(
    student_id: int,
    db: Session = Depends(get_db),
):
    service = WalletService(db)
    try:
        service.students.find_by_id(student_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return service.get_student_transactions(student_id)


@router.get("/balances", response_model=list[StudentBalanceResponse])
def get_all_balances(db: Session = Depends(get_db)):
    """Every active student's balance, in roster order."""
    balances = WalletService(db).get_all_student_balances()
    return [
        StudentBalanceResponse(
            student=StudentResponse.model_validate(student),
            balance=balance,
        )
        for student, balance in balances.items()
    ]


@router.get("/top-earners", response_model=list[StudentBalanceResponse])
def get_top_earners(
    limit: int = Query(default=5, ge=1, le=100),
    db: Session = Depends(get_db),
):
    earners = WalletService(db).get_top_earners(limit)
    return [
        StudentBalanceResponse(
            student=StudentResponse.model_validate(e["student"]),
            balance=e["balance"],
        )
        for e in earners
    ]


@router.get("/statistics", response_model=ClassStatisticsResponse)
def get_class_statistics(db: Session = Depends(get_db)):
    return WalletService(db).get_class_statistics()


# --- Transactions ---

@router.get("/transactions", response_model=list[WalletTransactionResponse])
def list_transactions(
    transaction_type: TransactionType | None = None,
    category: str | None = None,
    start_date: date | None = None,
    end_date: date | None = None,
    db: Session = Depends(get_db),
):
    """
    List transactions, newest first.

    At most one filter applies: type, category, or a date range
    (both start_date and end_date). Without filters every
    transaction is returned in creation order.
    """
    service = WalletService(db)
    if transaction_type is not None:
        return service.get_transactions_by_type(transaction_type)
    if category is not None:
        return service.get_transactions_by_category(category)
    if start_date is not None or end_date is not None:
        if start_date is None or end_date is None:
            raise HTTPException(
                status_code=400,
                detail="start_date and end_date must be given together",
            )
        return service.get_transactions_by_date_range(start_date, end_date)
    return service.get_all_transactions()


@router.get("/transactions/recent", response_model=list[WalletTransactionResponse])
def list_recent_transactions(
    days: int = Query(default=7, ge=0),
    db: Session = Depends(get_db),
):
    return WalletService(db).get_recent_transactions(days)


@router.get("/transactions/unapproved", response_model=list[WalletTransactionResponse])
def list_unapproved_transactions(db: Session = Depends(get_db)):
    return WalletService(db).get_unapproved_transactions()


@router.get("/transactions/{transaction_id}", response_model=WalletTransactionResponse)
def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    try:
        return WalletService(db).get_transaction(transaction_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/transactions/{transaction_id}", response_model=WalletTransactionResponse)
def update_transaction(
    transaction_id: int,
    request: WalletTransactionUpdate,
    db: Session = Depends(get_db),
):
    """Edit description, category, notes or approval. Amounts are fixed."""
    try:
        return WalletService(db).update_transaction(transaction_id, request)
    except ValueError as e:
        raise _http_error(e)


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    """
    Delete a transaction; later balance snapshots are recomputed.

    Only a logged-in teacher may delete ledger history.
    """
    try:
        session_manager.require_login()
    except SessionRequiredError as e:
        raise HTTPException(status_code=401, detail=str(e))
    WalletService(db).delete_transaction(transaction_id)


# --- Sync ---

@router.get("/sync/pending", response_model=list[WalletTransactionResponse])
def get_pending_sync(db: Session = Depends(get_db)):
    return WalletService(db).get_transactions_needing_sync()


@router.post("/transactions/{transaction_id}/synced", status_code=204)
def mark_synced(
    transaction_id: int,
    db: Session = Depends(get_db),
):
    """Mark a transaction as pushed to the admin server. Unknown ids are ignored."""
    WalletService(db).mark_synced(transaction_id)
