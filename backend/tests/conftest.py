from __future__ import annotations

from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lockin.auth import get_current_user, hash_password
from lockin.config import Settings
from lockin.database import Base, enable_sqlite_foreign_keys, get_db
from lockin.main import app
from lockin.models import Job, Resume, User
from lockin.services.postings import RawJobPosting

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(test_engine, "connect", enable_sqlite_foreign_keys)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture()
def db_session():
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture()
def user(db_session) -> User:
    account = User(email="ada@example.com", password_hash=hash_password("secret-pass"), name="Ada")
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


@pytest.fixture()
def anon_client(db_session):
    """TestClient wired to the in-memory database with real token auth."""

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def client(anon_client, user):
    """TestClient that is already signed in as ``user``."""
    app.dependency_overrides[get_current_user] = lambda: user
    return anon_client


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        scrape_delay_seconds=0,
        max_scrape_pages=1,
        max_jobs_per_source=15,
        http_timeout_seconds=5,
        serpapi_key="",
    )


def make_resume(db, owner: User, analysis: dict[str, Any] | None = None) -> Resume:
    resume = Resume(
        user_id=owner.id,
        filename="cv.pdf",
        file_path="/tmp/cv.pdf",
        file_url="/uploads/cv.pdf",
        raw_text="Python developer",
        analysis=analysis,
    )
    db.add(resume)
    db.commit()
    db.refresh(resume)
    return resume


def make_job(db, title: str, skills: list[str], description: str = "", company: str = "Acme") -> Job:
    job = Job(title=title, company=company, location="Berlin", description=description, skills=skills)
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def make_posting(title: str, company: str = "Acme", description: str = "Python role") -> RawJobPosting:
    return RawJobPosting(
        title=title,
        company=company,
        location="Remote",
        description=description,
        url=f"https://jobs.example.com/{title.lower().replace(' ', '-')}",
        source="fake",
        requirements=["Python"],
    )


def chat_response(content: str, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json={"choices": [{"message": {"content": content}}]})
