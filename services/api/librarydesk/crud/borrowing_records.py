from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, cast

from librarydesk.models.base import utcnow
from librarydesk.models.book import Book
from librarydesk.models.borrowing_record import BorrowingRecord, LoanStatus
from librarydesk.models.member import Member
from sqlalchemy import func, select, update
from sqlalchemy.engine import CursorResult
from sqlalchemy.orm import Session


@dataclass(frozen=True)
class LoanRow:
    record: BorrowingRecord
    book_title: str | None
    book_author: str | None
    member_name: str | None
    member_email: str | None


def list_records(db: Session, *, status: str | None = None) -> list[BorrowingRecord]:
    stmt = select(BorrowingRecord)
    if status is not None:
        stmt = stmt.where(BorrowingRecord.status == status)
    stmt = stmt.order_by(BorrowingRecord.created_at.desc())
    return list(db.execute(stmt).scalars().all())


def list_loan_rows(db: Session) -> list[LoanRow]:
    """Newest loans first, joined with the book and member they reference."""
    stmt = (
        select(
            BorrowingRecord,
            Book.title,
            Book.author,
            Member.name,
            Member.email,
        )
        .outerjoin(Book, Book.id == BorrowingRecord.book_id)
        .outerjoin(Member, Member.id == BorrowingRecord.member_id)
        .order_by(BorrowingRecord.created_at.desc())
    )
    rows: list[LoanRow] = []
    for record, title, author, name, email in db.execute(stmt).tuples().all():
        rows.append(
            LoanRow(
                record=record,
                book_title=title,
                book_author=author,
                member_name=name,
                member_email=email,
            )
        )
    return rows


def get_record(db: Session, *, record_id: str) -> BorrowingRecord | None:
    return db.get(BorrowingRecord, record_id)


def insert_record(
    db: Session, *, book_id: str, member_id: str, due_date: date
) -> BorrowingRecord:
    record = BorrowingRecord(
        book_id=book_id,
        member_id=member_id,
        due_date=due_date,
        status=LoanStatus.borrowed.value,
    )
    db.add(record)
    db.flush()
    return record


def mark_returned(db: Session, *, record_id: str, return_date: date) -> bool:
    """Move a record from borrowed to returned.

    Matches only while the record is still borrowed, so a second call is a
    no-op and returns False.
    """
    stmt = (
        update(BorrowingRecord)
        .where(
            BorrowingRecord.id == record_id,
            BorrowingRecord.status == LoanStatus.borrowed.value,
        )
        .values(
            status=LoanStatus.returned.value,
            return_date=return_date,
            updated_at=utcnow(),
        )
    )
    res = cast(CursorResult[Any], db.execute(stmt))
    return int(res.rowcount or 0) == 1


def count_outstanding(
    db: Session, *, book_id: str | None = None, member_id: str | None = None
) -> int:
    stmt = (
        select(func.count())
        .select_from(BorrowingRecord)
        .where(BorrowingRecord.status == LoanStatus.borrowed.value)
    )
    if book_id is not None:
        stmt = stmt.where(BorrowingRecord.book_id == book_id)
    if member_id is not None:
        stmt = stmt.where(BorrowingRecord.member_id == member_id)
    return int(db.execute(stmt).scalar_one())
