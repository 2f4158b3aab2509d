"""
Teacher session: who is using the client right now.

The desktop client has one logged-in teacher at a time. A
session expires after a period of inactivity (a full school day
by default); an expired session is logged out the next time it
is checked.
"""

from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session

from classwallet.config import get_settings
from classwallet.logging_setup import get_logger
from classwallet.models.teacher import Teacher
from classwallet.services.errors import NotFoundError, SessionRequiredError

logger = get_logger(__name__)

EXPIRING_SOON_MINUTES = 30


class SessionManager:

    def __init__(
        self,
        timeout_hours: int | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if timeout_hours is None:
            timeout_hours = get_settings().SESSION_TIMEOUT_HOURS
        self.timeout = timedelta(hours=timeout_hours)
        self._clock = clock
        self._teacher: Teacher | None = None
        self.login_time: datetime | None = None
        self.last_activity_time: datetime | None = None

    def login(self, teacher: Teacher) -> None:
        now = self._clock()
        self._teacher = teacher
        self.login_time = now
        self.last_activity_time = now
        logger.info(
            "Teacher logged in: %s (%s)", teacher.full_name, teacher.employee_id
        )

    def login_by_employee_id(self, db: Session, employee_id: str) -> Teacher:
        """Look up an active teacher and start a session for them."""
        teacher = db.execute(
            select(Teacher).where(
                Teacher.employee_id == employee_id,
                Teacher.active.is_(True),
            )
        ).scalar_one_or_none()
        if not teacher:
            raise NotFoundError(f"Teacher {employee_id} not found")
        # The session outlives the request's database session
        db.expunge(teacher)
        self.login(teacher)
        return teacher

    def logout(self) -> None:
        if self._teacher is not None:
            logger.info(
                "Teacher logged out: %s (%s) - session duration: %d minutes",
                self._teacher.full_name,
                self._teacher.employee_id,
                self.session_duration_minutes(),
            )
        self._teacher = None
        self.login_time = None
        self.last_activity_time = None

    @property
    def current_teacher(self) -> Teacher | None:
        """The logged-in teacher. Reading it counts as activity."""
        self.update_activity()
        return self._teacher

    @property
    def current_teacher_id(self) -> int | None:
        return self._teacher.id if self._teacher else None

    @property
    def current_employee_id(self) -> str | None:
        return self._teacher.employee_id if self._teacher else None

    @property
    def current_teacher_name(self) -> str:
        return self._teacher.full_name if self._teacher else "Guest"

    def is_logged_in(self) -> bool:
        if self._teacher is None:
            return False

        if self.is_session_expired():
            logger.warning(
                "Session expired for teacher %s - last activity: %s",
                self._teacher.employee_id, self.last_activity_time,
            )
            self.logout()
            return False

        return True

    def is_session_expired(self) -> bool:
        if self.last_activity_time is None:
            return True
        return self._clock() > self.last_activity_time + self.timeout

    def update_activity(self) -> None:
        if self._teacher is not None:
            self.last_activity_time = self._clock()

    def session_duration_minutes(self) -> int:
        if self.login_time is None:
            return 0
        return int((self._clock() - self.login_time).total_seconds() // 60)

    def minutes_until_expiration(self) -> int:
        if self.last_activity_time is None:
            return 0
        remaining = self.last_activity_time + self.timeout - self._clock()
        return max(0, int(remaining.total_seconds() // 60))

    def is_session_expiring_soon(self) -> bool:
        return (
            self.is_logged_in()
            and self.minutes_until_expiration() <= EXPIRING_SOON_MINUTES
        )

    def require_login(self) -> None:
        if not self.is_logged_in():
            raise SessionRequiredError(
                "User must be logged in to perform this action"
            )

    def session_info(self) -> str:
        if not self.is_logged_in():
            return "Not logged in"
        return (
            f"Logged in as: {self._teacher.full_name} "
            f"({self._teacher.employee_id}) | "
            f"Session: {self.session_duration_minutes()} minutes | "
            f"Expires in: {self.minutes_until_expiration()} minutes"
        )


# One session per running client
session_manager = SessionManager()
