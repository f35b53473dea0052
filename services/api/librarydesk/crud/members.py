from __future__ import annotations

from typing import Any, Literal

from librarydesk.models.base import utcnow
from librarydesk.models.member import Member
from sqlalchemy import select
from sqlalchemy.orm import Session


def list_members(
    db: Session,
    *,
    status: str | None = None,
    order: Literal["created", "name"] = "created",
) -> list[Member]:
    stmt = select(Member)
    if status is not None:
        stmt = stmt.where(Member.status == status)
    if order == "name":
        stmt = stmt.order_by(Member.name.asc())
    else:
        stmt = stmt.order_by(Member.created_at.desc())
    return list(db.execute(stmt).scalars().all())


def get_member(db: Session, *, member_id: str) -> Member | None:
    return db.get(Member, member_id)


def insert_member(db: Session, **fields: Any) -> Member:
    member = Member(**fields)
    db.add(member)
    db.flush()
    return member


def update_member(db: Session, *, member: Member, patch: dict[str, Any]) -> Member:
    for key, value in patch.items():
        setattr(member, key, value)
    member.updated_at = utcnow()
    db.add(member)
    db.flush()
    return member


def delete_member(db: Session, *, member: Member) -> None:
    db.delete(member)
    db.flush()
