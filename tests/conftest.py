"""
Test configuration and fixtures
"""
import os
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set testing environment before the app reads its settings
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from projecthub.main import app
from projecthub.auth.deps import get_db
from projecthub.db.session import Base
from projecthub.documents.storage import DocumentStore, get_document_store
from projecthub.models.document import Document
from projecthub.models.project import Project
from projecthub.models.user import User, UserRole
from projecthub.auth.service import issue_token
from projecthub.utils.security import hash_password

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """Fresh schema for every test"""
    Base.metadata.create_all(bind=engine)
    session = TestSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(tmp_path):
    return DocumentStore(tmp_path / "uploads")


@pytest.fixture
def client(db_session, store):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_document_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make(role: UserRole, name: str | None = None, email: str | None = None, password: str = "secret123"):
        counter["n"] += 1
        user = User(
            name=name or f"{role.value} user {counter['n']}",
            email=email or f"{role.value}{counter['n']}@college.edu",
            password_hash=hash_password(password),
            role=role.value,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def faculty(make_user):
    return make_user(UserRole.FACULTY, name="Dr. Rao")


@pytest.fixture
def senior(make_user):
    return make_user(UserRole.STUDENT_FOURTH, name="Asha")


@pytest.fixture
def other_senior(make_user):
    return make_user(UserRole.STUDENT_FOURTH, name="Vikram")


@pytest.fixture
def junior(make_user):
    return make_user(UserRole.STUDENT_THIRD, name="Meera")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {issue_token(user)}"}


@pytest.fixture
def make_project(db_session, store):
    """Insert a project directly, optionally with documents written to the store."""
    counter = {"n": 0}

    def _make(author: User, status: str = "pending", documents: int = 0, **fields):
        counter["n"] += 1
        project = Project(
            title=fields.pop("title", f"Project {counter['n']}"),
            abstract=fields.pop("abstract", "An abstract long enough to describe the work."),
            domain=fields.pop("domain", "Machine Learning"),
            year=fields.pop("year", "2024"),
            technologies=fields.pop("technologies", "Python, FastAPI"),
            author_id=author.id,
            status=status,
            submitted_date=fields.pop("submitted_date", datetime.utcnow() + timedelta(seconds=counter["n"])),
            **fields,
        )
        db_session.add(project)
        db_session.flush()
        store.root.mkdir(parents=True, exist_ok=True)
        for i in range(documents):
            name = f"doc{project.id}_{i}.pdf"
            path = store.root / name
            path.write_bytes(b"%PDF-1.4 test " + name.encode())
            db_session.add(Document(
                project_id=project.id,
                filename=name,
                original_name=f"report_{i}.pdf",
                file_path=str(path),
                file_size=path.stat().st_size,
                mime_type="application/pdf",
            ))
        db_session.commit()
        db_session.refresh(project)
        return project

    return _make


@pytest.fixture
def headers():
    return auth_headers
