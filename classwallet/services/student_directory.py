"""
Student directory: the roster the wallet reads from.
"""

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from classwallet.logging_setup import get_logger
from classwallet.models.student import Student
from classwallet.schemas.student import StudentCreate
from classwallet.services.errors import NotFoundError

logger = get_logger(__name__)


class StudentDirectory:

    def __init__(self, db: Session):
        self.db = db

    def create_student(self, request: StudentCreate) -> Student:
        """Register a student. The admin-system id must be unique."""
        existing = self.db.execute(
            select(Student).where(Student.student_id == request.student_id)
        ).scalar_one_or_none()

        if existing:
            raise ValueError(
                f"Student with id '{request.student_id}' already exists"
            )

        student = Student(
            student_id=request.student_id,
            first_name=request.first_name,
            last_name=request.last_name,
            grade_level=request.grade_level,
            email=request.email,
        )
        self.db.add(student)
        self.db.flush()
        logger.info("Registered student %s (%s)", student.full_name, student.student_id)
        return student

    def find_by_id(self, student_id: int) -> Student:
        student = self.db.get(Student, student_id)
        if not student:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def find_active(self) -> list[Student]:
        """Active students in roster order."""
        students = self.db.execute(
            select(Student)
            .where(Student.active.is_(True))
            .order_by(Student.id)
        ).scalars().all()
        return list(students)

    def count_active(self) -> int:
        return self.db.execute(
            select(func.count(Student.id)).where(Student.active.is_(True))
        ).scalar_one()

    def deactivate(self, student_id: int) -> Student:
        """Take a student off the active roster. History is kept."""
        student = self.find_by_id(student_id)
        student.active = False
        self.db.flush()
        logger.info("Deactivated student %s", student.student_id)
        return student
