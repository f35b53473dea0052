from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Sequence

from librarydesk.crud.books import list_books
from librarydesk.crud.borrowing_records import list_records
from librarydesk.crud.members import list_members
from librarydesk.models.base import utctoday
from librarydesk.models.borrowing_record import LoanStatus
from librarydesk.models.member import MemberStatus
from librarydesk.services.loans import is_overdue
from librarydesk.services.transaction import store_read
from sqlalchemy.orm import Session


@dataclass(frozen=True)
class DashboardStats:
    total_books: int
    available_books: int
    total_members: int
    active_members: int
    borrowed_books: int
    overdue_books: int
    utilization_rate: float
    member_activity_rate: float

    @property
    def utilization_percent(self) -> float:
        return round(self.utilization_rate * 100, 1)

    @property
    def member_activity_percent(self) -> float:
        return round(self.member_activity_rate * 100, 1)


def _ratio(part: int, whole: int) -> float:
    return part / whole if whole else 0.0


def compute_dashboard_stats(
    books: Sequence[Any],
    members: Sequence[Any],
    records: Sequence[Any],
    today: date | None = None,
) -> DashboardStats:
    """Reduce the three tables into summary counts and ratios.

    Pure function: nothing is read from or written to the store here.
    """
    today = today or utctoday()

    total_books = sum(b.total_copies for b in books)
    available_books = sum(b.available_copies for b in books)

    total_members = len(members)
    active_members = sum(1 for m in members if m.status == MemberStatus.active.value)

    borrowed = [r for r in records if r.status == LoanStatus.borrowed.value]
    overdue_books = sum(1 for r in borrowed if is_overdue(r, today))

    return DashboardStats(
        total_books=total_books,
        available_books=available_books,
        total_members=total_members,
        active_members=active_members,
        borrowed_books=len(borrowed),
        overdue_books=overdue_books,
        utilization_rate=_ratio(total_books - available_books, total_books),
        member_activity_rate=_ratio(active_members, total_members),
    )


def load_dashboard_stats(db: Session, *, today: date | None = None) -> DashboardStats:
    with store_read(db, "loading dashboard"):
        books = list_books(db)
        members = list_members(db)
        records = list_records(db)
    return compute_dashboard_stats(books, members, records, today=today)
