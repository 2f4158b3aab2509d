"""
Teacher session API endpoints.

Credentials are checked by the admin server; this client only
tracks who is at the keyboard and for how long.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from classwallet.models.base import get_db
from classwallet.services.errors import NotFoundError
from classwallet.services.session_manager import session_manager
from classwallet.schemas.session import LoginRequest, SessionResponse

router = APIRouter(prefix="/session", tags=["Session"])


def _session_state() -> SessionResponse:
    logged_in = session_manager.is_logged_in()
    return SessionResponse(
        logged_in=logged_in,
        teacher_id=session_manager.current_teacher_id,
        employee_id=session_manager.current_employee_id,
        teacher_name=session_manager.current_teacher_name,
        session_minutes=session_manager.session_duration_minutes(),
        expires_in_minutes=session_manager.minutes_until_expiration(),
        info=session_manager.session_info(),
    )


@router.post("/login", response_model=SessionResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db),
):
    try:
        session_manager.login_by_employee_id(db, request.employee_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _session_state()


@router.post("/logout", response_model=SessionResponse)
def logout():
    session_manager.logout()
    return _session_state()


@router.get("", response_model=SessionResponse)
def get_session():
    return _session_state()
