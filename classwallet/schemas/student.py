"""
Pydantic schemas for the student directory.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class StudentCreate(BaseModel):
    student_id: str = Field(min_length=1, max_length=50)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    grade_level: int | None = Field(default=None, ge=0, le=12)
    email: str | None = Field(default=None, max_length=255)


class StudentResponse(BaseModel):
    id: int
    student_id: str
    first_name: str
    last_name: str
    grade_level: int | None
    email: str | None
    active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
