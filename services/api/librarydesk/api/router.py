from __future__ import annotations

from fastapi import APIRouter
from librarydesk.api.routes import books, dashboard, health, loans, members

api_router = APIRouter()
api_router.include_router(health.router)

# Registered in tab order: dashboard, books, members, borrowing.
for _router in (
    dashboard.router,
    books.router,
    members.router,
    loans.router,
):
    api_router.include_router(_router)
