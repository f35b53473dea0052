from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class DashboardOut(BaseModel):
    total_books: int
    available_books: int
    total_members: int
    active_members: int
    borrowed_books: int
    overdue_books: int

    utilization_rate: float
    member_activity_rate: float
    utilization_percent: float
    member_activity_percent: float

    generated_at: datetime
