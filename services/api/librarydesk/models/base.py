from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy.orm import DeclarativeBase


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def utctoday() -> date:
    return utcnow().date()


class Base(DeclarativeBase):
    pass
