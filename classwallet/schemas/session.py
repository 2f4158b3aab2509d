"""
Pydantic schemas for the teacher session.
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    employee_id: str = Field(min_length=1, max_length=50)


class SessionResponse(BaseModel):
    logged_in: bool
    teacher_id: int | None = None
    employee_id: str | None = None
    teacher_name: str
    session_minutes: int
    expires_in_minutes: int
    info: str
