from __future__ import annotations

import logging

from librarydesk.crud.borrowing_records import count_outstanding
from librarydesk.crud.members import (
    delete_member,
    get_member,
    insert_member,
    list_members,
    update_member,
)
from librarydesk.models.member import Member
from librarydesk.schemas.members import MemberIn
from librarydesk.services.errors import (
    ConfirmationRequiredError,
    ConflictError,
    NotFoundError,
)
from librarydesk.services.search import filter_loaded
from librarydesk.services.transaction import store_read, store_write
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("name", "email", "phone")


class MembershipManager:
    """Member CRUD with the same refresh-after-write shape as CatalogManager."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.members: list[Member] = []

    def refresh(self) -> list[Member]:
        with store_read(self.db, "loading members"):
            self.members = list_members(self.db)
        return self.members

    def search(self, term: str | None) -> list[Member]:
        return filter_loaded(self.members, term, *SEARCH_FIELDS)

    def get(self, member_id: str) -> Member:
        with store_read(self.db, "loading member"):
            member = get_member(self.db, member_id=member_id)
        if member is None:
            raise NotFoundError("Member not found")
        return member

    def create(self, payload: MemberIn) -> Member:
        # membership_date comes from the column default (today, UTC)
        with store_write(self.db, "adding member"):
            member = insert_member(self.db, **payload.model_dump(mode="json"))
        self.refresh()
        return member

    def update(self, member_id: str, payload: MemberIn) -> Member:
        member = self.get(member_id)
        with store_write(self.db, "updating member"):
            update_member(self.db, member=member, patch=payload.model_dump(mode="json"))
        self.refresh()
        return member

    def delete(self, member_id: str, *, confirmed: bool) -> None:
        if not confirmed:
            raise ConfirmationRequiredError("Deleting a member requires confirmation")
        member = self.get(member_id)

        with store_read(self.db, "counting loans"):
            on_loan = count_outstanding(self.db, member_id=member_id)
        if on_loan:
            raise ConflictError(
                f"Member still holds {on_loan} borrowed books and cannot be deleted"
            )

        with store_write(self.db, "deleting member"):
            delete_member(self.db, member=member)
        logger.info("member deleted", extra={"member_id": member_id})
        self.refresh()
