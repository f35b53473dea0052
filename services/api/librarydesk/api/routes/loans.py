from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from librarydesk.api.deps import get_loans, raise_http
from librarydesk.api.rate_limit import rate_limiter
from librarydesk.core.config import settings
from librarydesk.crud.borrowing_records import LoanRow
from librarydesk.models.base import utctoday
from librarydesk.models.borrowing_record import BorrowingRecord
from librarydesk.schemas.books import BookOut
from librarydesk.schemas.loans import (
    BorrowIn,
    LoanBookOut,
    LoanMemberOut,
    LoanOptionsOut,
    LoanOut,
)
from librarydesk.schemas.members import MemberOut
from librarydesk.services.errors import LibraryError
from librarydesk.services.loans import LoanManager, display_status, is_overdue

router = APIRouter(prefix="/v1", tags=["borrowing"])

WRITE_LIMIT = [
    Depends(
        rate_limiter(
            "loan_writes",
            limit=settings.rate_limit_writes_per_window,
            window_seconds=settings.rate_limit_window_seconds,
        )
    )
]


def _loan_out(row: LoanRow, today: date) -> LoanOut:
    r = row.record
    return LoanOut(
        id=r.id,
        book_id=r.book_id,
        member_id=r.member_id,
        borrow_date=r.borrow_date,
        due_date=r.due_date,
        return_date=r.return_date,
        status=r.status,
        is_overdue=is_overdue(r, today),
        display_status=display_status(r, today),
        created_at=r.created_at,
        updated_at=r.updated_at,
        book=(
            LoanBookOut(title=row.book_title, author=row.book_author or "")
            if row.book_title is not None
            else None
        ),
        member=(
            LoanMemberOut(name=row.member_name, email=row.member_email or "")
            if row.member_name is not None
            else None
        ),
    )


def _find_row(loans: LoanManager, record: BorrowingRecord) -> LoanOut:
    today = utctoday()
    for row in loans.loans:
        if row.record.id == record.id:
            return _loan_out(row, today)
    # The record was written; fall back to it without joined details.
    bare = LoanRow(
        record=record,
        book_title=None,
        book_author=None,
        member_name=None,
        member_email=None,
    )
    return _loan_out(bare, today)


@router.get("/loans", response_model=list[LoanOut])
def list_loans(loans: LoanManager = Depends(get_loans)):
    try:
        loans.refresh()
    except LibraryError as exc:
        raise_http(exc)
    today = utctoday()
    return [_loan_out(row, today) for row in loans.loans]


@router.get("/loans/options", response_model=LoanOptionsOut)
def loan_options(loans: LoanManager = Depends(get_loans)):
    try:
        loans.refresh()
    except LibraryError as exc:
        raise_http(exc)
    return LoanOptionsOut(
        books=[BookOut.model_validate(b) for b in loans.books],
        members=[MemberOut.model_validate(m) for m in loans.members],
    )


@router.post("/loans", response_model=LoanOut, status_code=201, dependencies=WRITE_LIMIT)
def borrow_book(payload: BorrowIn, loans: LoanManager = Depends(get_loans)):
    try:
        record = loans.borrow(payload.book_id, payload.member_id, payload.due_date)
    except LibraryError as exc:
        raise_http(exc)
    return _find_row(loans, record)


@router.post("/loans/{loan_id}/return", response_model=LoanOut, dependencies=WRITE_LIMIT)
def return_book(
    loan_id: str,
    confirm: bool = Query(default=False),
    loans: LoanManager = Depends(get_loans),
):
    try:
        record = loans.return_loan(loan_id, confirmed=confirm)
    except LibraryError as exc:
        raise_http(exc)
    return _find_row(loans, record)
