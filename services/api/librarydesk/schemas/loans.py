from __future__ import annotations

from datetime import date, datetime

from librarydesk.models.base import utctoday
from librarydesk.models.borrowing_record import LoanStatus
from librarydesk.schemas.books import BookOut
from librarydesk.schemas.members import MemberOut
from pydantic import BaseModel, field_validator


class BorrowIn(BaseModel):
    book_id: str
    member_id: str
    due_date: date

    @field_validator("due_date")
    @classmethod
    def due_date_must_be_after_today(cls, v: date) -> date:
        if v <= utctoday():
            raise ValueError("due_date must be tomorrow or later")
        return v


class LoanBookOut(BaseModel):
    title: str
    author: str


class LoanMemberOut(BaseModel):
    name: str
    email: str


class LoanOut(BaseModel):
    id: str
    book_id: str
    member_id: str
    borrow_date: date
    due_date: date
    return_date: date | None = None
    status: LoanStatus
    is_overdue: bool
    display_status: str
    created_at: datetime
    updated_at: datetime

    book: LoanBookOut | None = None
    member: LoanMemberOut | None = None


class LoanOptionsOut(BaseModel):
    books: list[BookOut]
    members: list[MemberOut]
