from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from librarydesk.api.deps import get_membership, raise_http
from librarydesk.api.rate_limit import rate_limiter
from librarydesk.core.config import settings
from librarydesk.schemas.members import MemberIn, MemberOut
from librarydesk.services.errors import LibraryError
from librarydesk.services.membership import MembershipManager

router = APIRouter(prefix="/v1", tags=["members"])

WRITE_LIMIT = [
    Depends(
        rate_limiter(
            "member_writes",
            limit=settings.rate_limit_writes_per_window,
            window_seconds=settings.rate_limit_window_seconds,
        )
    )
]


@router.get("/members", response_model=list[MemberOut])
def list_members(
    q: str | None = Query(default=None, description="Matches name, email or phone"),
    membership: MembershipManager = Depends(get_membership),
):
    try:
        membership.refresh()
    except LibraryError as exc:
        raise_http(exc)
    return membership.search(q)


@router.get("/members/{member_id}", response_model=MemberOut)
def get_member(member_id: str, membership: MembershipManager = Depends(get_membership)):
    try:
        return membership.get(member_id)
    except LibraryError as exc:
        raise_http(exc)


@router.post("/members", response_model=MemberOut, status_code=201, dependencies=WRITE_LIMIT)
def create_member(payload: MemberIn, membership: MembershipManager = Depends(get_membership)):
    try:
        return membership.create(payload)
    except LibraryError as exc:
        raise_http(exc)


@router.put("/members/{member_id}", response_model=MemberOut, dependencies=WRITE_LIMIT)
def update_member(
    member_id: str,
    payload: MemberIn,
    membership: MembershipManager = Depends(get_membership),
):
    try:
        return membership.update(member_id, payload)
    except LibraryError as exc:
        raise_http(exc)


@router.delete("/members/{member_id}", status_code=204, dependencies=WRITE_LIMIT)
def delete_member(
    member_id: str,
    confirm: bool = Query(default=False),
    membership: MembershipManager = Depends(get_membership),
) -> Response:
    try:
        membership.delete(member_id, confirmed=confirm)
    except LibraryError as exc:
        raise_http(exc)
    return Response(status_code=204)
