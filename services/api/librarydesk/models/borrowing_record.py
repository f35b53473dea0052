from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from uuid import uuid4

from librarydesk.models.base import Base, utcnow, utctoday
from sqlalchemy import Date, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship


class LoanStatus(str, Enum):
    borrowed = "borrowed"
    returned = "returned"


class BorrowingRecord(Base):
    __tablename__ = "borrowing_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), index=True, nullable=False
    )
    member_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("members.id", ondelete="CASCADE"), index=True, nullable=False
    )

    borrow_date: Mapped[date] = mapped_column(Date, default=utctoday, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    return_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # borrowed -> returned, never back
    status: Mapped[str] = mapped_column(
        String(20), index=True, nullable=False, default=LoanStatus.borrowed.value
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    book = relationship("Book", back_populates="borrowing_records")
    member = relationship("Member", back_populates="borrowing_records")
