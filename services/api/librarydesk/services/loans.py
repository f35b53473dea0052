from __future__ import annotations

import logging
from datetime import date
from typing import Any

from librarydesk.crud.books import adjust_available_copies, get_book, list_books
from librarydesk.crud.borrowing_records import (
    LoanRow,
    get_record,
    insert_record,
    list_loan_rows,
    mark_returned,
)
from librarydesk.crud.members import get_member, list_members
from librarydesk.models.base import utctoday
from librarydesk.models.book import Book
from librarydesk.models.borrowing_record import BorrowingRecord, LoanStatus
from librarydesk.models.member import Member, MemberStatus
from librarydesk.services.errors import (
    ConfirmationRequiredError,
    ConflictError,
    MemberInactiveError,
    NoCopiesAvailableError,
    NotFoundError,
)
from librarydesk.services.transaction import store_read, store_write
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(key)
    return getattr(obj, key, None)


def is_overdue(record: Any, today: date | None = None) -> bool:
    """A loan is overdue while it is still borrowed and its due date has passed.

    Returned loans are never overdue, however late they came back.
    """
    if _get(record, "status") != LoanStatus.borrowed.value:
        return False
    due = _get(record, "due_date")
    return due is not None and due < (today or utctoday())


def display_status(record: Any, today: date | None = None) -> str:
    if _get(record, "status") == LoanStatus.returned.value:
        return "Returned"
    if is_overdue(record, today):
        return "Overdue"
    return "Borrowed"


class LoanManager:
    """Issues and returns loans while keeping `available_copies` in step.

    Each borrow/return is a single transaction: the loan write and the
    copy-count write commit together or not at all. Copy counts only ever
    move through atomic UPDATEs, never from a value read earlier.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.books: list[Book] = []
        self.members: list[Member] = []
        self.loans: list[LoanRow] = []

    def refresh(self) -> list[LoanRow]:
        # Borrow form choices: books with a copy on the shelf, active members.
        with store_read(self.db, "loading loans"):
            self.books = list_books(self.db, available_only=True, order="title")
            self.members = list_members(
                self.db, status=MemberStatus.active.value, order="name"
            )
            self.loans = list_loan_rows(self.db)
        return self.loans

    def borrow(self, book_id: str, member_id: str, due_date: date) -> BorrowingRecord:
        with store_read(self.db, "loading borrow details"):
            book = get_book(self.db, book_id=book_id)
            member = get_member(self.db, member_id=member_id)
        if book is None:
            raise NotFoundError("Book not found")
        if member is None:
            raise NotFoundError("Member not found")
        if member.status != MemberStatus.active.value:
            raise MemberInactiveError(f"Member '{member.name}' is not active")

        title = book.title
        with store_write(self.db, "borrowing book"):
            taken = adjust_available_copies(
                self.db, book_id=book_id, delta=-1, require_available=True
            )
            if not taken:
                raise NoCopiesAvailableError(f"No copies of '{title}' are available")
            record = insert_record(
                self.db, book_id=book_id, member_id=member_id, due_date=due_date
            )
            record_id = record.id

        logger.info(
            "loan issued",
            extra={"loan_id": record_id, "book_id": book_id, "member_id": member_id},
        )
        self.refresh()
        return record

    def return_loan(
        self, record_id: str, *, confirmed: bool, today: date | None = None
    ) -> BorrowingRecord:
        if not confirmed:
            raise ConfirmationRequiredError("Returning a book requires confirmation")
        with store_read(self.db, "loading borrowing record"):
            record = get_record(self.db, record_id=record_id)
        if record is None:
            raise NotFoundError("Borrowing record not found")

        book_id = record.book_id
        with store_write(self.db, "returning book"):
            if not mark_returned(
                self.db, record_id=record_id, return_date=today or utctoday()
            ):
                raise ConflictError("Book has already been returned")
            # The record transitioned, so exactly one copy goes back.
            if not adjust_available_copies(self.db, book_id=book_id, delta=1):
                logger.warning(
                    "returned loan references a missing book",
                    extra={"loan_id": record_id, "book_id": book_id},
                )

        logger.info("loan returned", extra={"loan_id": record_id, "book_id": book_id})
        self.refresh()
        return record
