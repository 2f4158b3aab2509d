"""
Student directory API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from classwallet.models.base import get_db
from classwallet.services.errors import NotFoundError
from classwallet.services.student_directory import StudentDirectory
from classwallet.schemas.student import StudentCreate, StudentResponse

router = APIRouter(prefix="/students", tags=["Students"])


@router.post("", response_model=StudentResponse, status_code=201)
def create_student(
    request: StudentCreate,
    db: Session = Depends(get_db),
):
    """Register a student on the roster."""
    service = StudentDirectory(db)
    try:
        student = service.create_student(request)
        db.commit()
        return student
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=list[StudentResponse])
def list_active_students(db: Session = Depends(get_db)):
    """Active students in roster order."""
    return StudentDirectory(db).find_active()


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: int,
    db: Session = Depends(get_db),
):
    try:
        return StudentDirectory(db).find_by_id(student_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{student_id}/deactivate", response_model=StudentResponse)
def deactivate_student(
    student_id: int,
    db: Session = Depends(get_db),
):
    """Take a student off the active roster. Wallet history is kept."""
    service = StudentDirectory(db)
    try:
        student = service.deactivate(student_id)
        db.commit()
        return student
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
