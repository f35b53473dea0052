from __future__ import annotations

from datetime import date, datetime

from librarydesk.models.member import MemberStatus
from pydantic import BaseModel, EmailStr, Field


class MemberIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=40)
    status: MemberStatus = MemberStatus.active


class MemberOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    membership_date: date
    status: MemberStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
