from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from librarydesk.models.base import Base, utcnow
from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship


class Book(Base):
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("total_copies >= 1", name="ck_books_total_copies_positive"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    author: Mapped[str] = mapped_column(String(300), nullable=False)
    isbn: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    category: Mapped[str] = mapped_column(String(120), nullable=False)

    total_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # Kept in step with outstanding loans by the loan service, not by a constraint.
    available_copies: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    publication_year: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    borrowing_records = relationship(
        "BorrowingRecord", back_populates="book", cascade="all, delete-orphan"
    )
