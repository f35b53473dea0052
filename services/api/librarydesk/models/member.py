from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from uuid import uuid4

from librarydesk.models.base import Base, utcnow, utctoday
from sqlalchemy import Date, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship


class MemberStatus(str, Enum):
    active = "active"
    inactive = "inactive"


class Member(Base):
    __tablename__ = "members"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(320), index=True, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)

    membership_date: Mapped[date] = mapped_column(Date, default=utctoday, nullable=False)

    # active | inactive
    status: Mapped[str] = mapped_column(
        String(20), index=True, nullable=False, default=MemberStatus.active.value
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    borrowing_records = relationship(
        "BorrowingRecord", back_populates="member", cascade="all, delete-orphan"
    )
