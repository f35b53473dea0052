import os

# Settings are read at import time; give the app a store before importing it.
os.environ.setdefault("LIBRARY_STORE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("LIBRARY_STORE_KEY", "test-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from librarydesk.db.session import get_db  # noqa: E402
from librarydesk.main import app  # noqa: E402
from librarydesk.models import Base, Book, Member  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402


@pytest.fixture()
def engine():
    # Fresh in-memory store per test so no state leaks between them.
    eng = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def add_book(db_session):
    """Insert a book directly, bypassing the catalog manager."""

    def _add(
        title: str = "Dune",
        *,
        total: int = 1,
        available: int | None = None,
        created_at: datetime | None = None,
        **fields,
    ) -> Book:
        book = Book(
            title=title,
            author=fields.pop("author", "Frank Herbert"),
            isbn=fields.pop("isbn", "9780441013593"),
            category=fields.pop("category", "Science Fiction"),
            total_copies=total,
            available_copies=total if available is None else available,
            **fields,
        )
        if created_at is not None:
            book.created_at = created_at
        db_session.add(book)
        db_session.commit()
        return book

    return _add


@pytest.fixture()
def add_member(db_session):
    def _add(
        name: str = "Ann Lee",
        *,
        email: str | None = None,
        status: str = "active",
        created_at: datetime | None = None,
        **fields,
    ) -> Member:
        member = Member(
            name=name,
            email=email or f"{name.split()[0].lower()}@example.com",
            status=status,
            **fields,
        )
        if created_at is not None:
            member.created_at = created_at
        db_session.add(member)
        db_session.commit()
        return member

    return _add
