from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from librarydesk.api.deps import raise_http
from librarydesk.db.session import get_db
from librarydesk.schemas.dashboard import DashboardOut
from librarydesk.services.dashboard import load_dashboard_stats
from librarydesk.services.errors import LibraryError
from sqlalchemy.orm import Session

router = APIRouter(prefix="/v1", tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardOut)
def get_dashboard(db: Session = Depends(get_db)) -> DashboardOut:
    # Recomputed from the full tables on every call.
    try:
        stats = load_dashboard_stats(db)
    except LibraryError as exc:
        raise_http(exc)
    return DashboardOut(
        total_books=stats.total_books,
        available_books=stats.available_books,
        total_members=stats.total_members,
        active_members=stats.active_members,
        borrowed_books=stats.borrowed_books,
        overdue_books=stats.overdue_books,
        utilization_rate=stats.utilization_rate,
        member_activity_rate=stats.member_activity_rate,
        utilization_percent=stats.utilization_percent,
        member_activity_percent=stats.member_activity_percent,
        generated_at=datetime.now(timezone.utc),
    )
