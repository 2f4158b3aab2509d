"""
Shared test fixtures.

Sets up an isolated test database so tests never touch
the real database. Tables are created before each test and
dropped after it, so no test data persists.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from classwallet.main import app
from classwallet.models.base import Base, get_db
from classwallet.models.student import Student
from classwallet.models.teacher import Teacher
from classwallet.services.session_manager import session_manager


# SQLite file database: a file rather than :memory: so that
# threads with their own sessions see the same data.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_session():
    """The teacher session is process-wide; start every test logged out."""
    session_manager.logout()
    yield
    session_manager.logout()


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def session_factory():
    """Sessions for tests that need more than one connection."""
    return TestSessionLocal


@pytest.fixture
def client(db_session):
    """
    Provide a test client with the test database.

    The get_db dependency is overridden so the app uses
    the test session instead of the real database.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_student(db_session):
    """Factory for committed students."""
    counter = {"n": 0}

    def _make(first_name="Test", last_name="Student", active=True):
        counter["n"] += 1
        student = Student(
            student_id=f"S{counter['n']:04d}",
            first_name=first_name,
            last_name=last_name,
            grade_level=9,
            active=active,
        )
        db_session.add(student)
        db_session.commit()
        return student

    return _make


@pytest.fixture
def teacher(db_session):
    teacher = Teacher(
        employee_id="T1001",
        first_name="Ada",
        last_name="Lovelace",
        email="ada@school.test",
    )
    db_session.add(teacher)
    db_session.commit()
    return teacher
