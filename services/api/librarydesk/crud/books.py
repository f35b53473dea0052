"""Table-scoped access to `books`.

These functions only flush; the calling service owns commit/rollback so a
loan write and a copy-count write can share one transaction.
"""
from __future__ import annotations

from typing import Any, Literal, cast

from librarydesk.models.base import utcnow
from librarydesk.models.book import Book
from sqlalchemy import select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.orm import Session


def list_books(
    db: Session,
    *,
    available_only: bool = False,
    order: Literal["created", "title"] = "created",
) -> list[Book]:
    stmt = select(Book)
    if available_only:
        stmt = stmt.where(Book.available_copies > 0)
    if order == "title":
        stmt = stmt.order_by(Book.title.asc())
    else:
        stmt = stmt.order_by(Book.created_at.desc())
    return list(db.execute(stmt).scalars().all())


def get_book(db: Session, *, book_id: str) -> Book | None:
    return db.get(Book, book_id)


def insert_book(db: Session, **fields: Any) -> Book:
    book = Book(**fields)
    db.add(book)
    db.flush()
    return book


def update_book(db: Session, *, book: Book, patch: dict[str, Any]) -> Book:
    for key, value in patch.items():
        setattr(book, key, value)
    book.updated_at = utcnow()
    db.add(book)
    db.flush()
    return book


def delete_book(db: Session, *, book: Book) -> None:
    db.delete(book)
    db.flush()


def adjust_available_copies(
    db: Session, *, book_id: str, delta: int, require_available: bool = False
) -> bool:
    """Add `delta` to available_copies in a single UPDATE (no read step).

    With `require_available` the row only matches while copies remain, so the
    last copy can't be handed out twice. Returns whether a row was updated.
    """
    stmt = (
        update(Book)
        .where(Book.id == book_id)
        .values(
            available_copies=Book.available_copies + delta,
            updated_at=utcnow(),
        )
    )
    if require_available:
        stmt = stmt.where(Book.available_copies > 0)
    res = cast(CursorResult[Any], db.execute(stmt))
    return int(res.rowcount or 0) == 1
