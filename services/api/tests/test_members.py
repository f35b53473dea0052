from datetime import datetime, timedelta, timezone

import pytest
from librarydesk.models.base import utctoday
from librarydesk.schemas.members import MemberIn
from librarydesk.services.errors import (
    ConfirmationRequiredError,
    ConflictError,
    NotFoundError,
)
from librarydesk.services.loans import LoanManager
from librarydesk.services.membership import MembershipManager
from pydantic import ValidationError


def test_create_defaults_to_active_with_membership_date(db_session):
    membership = MembershipManager(db_session)
    member = membership.create(MemberIn(name="Ann Lee", email="ann@example.com"))

    assert member.status == "active"
    assert member.membership_date == utctoday()
    assert member.phone is None
    assert [m.id for m in membership.members] == [member.id]


def test_create_rejects_malformed_email():
    with pytest.raises(ValidationError):
        MemberIn(name="Ann Lee", email="not-an-email")


def test_create_rejects_unknown_status():
    with pytest.raises(ValidationError):
        MemberIn(name="Ann Lee", email="ann@example.com", status="suspended")


def test_list_is_newest_first(db_session, add_member):
    now = datetime.now(timezone.utc)
    first = add_member("Ann Lee", created_at=now - timedelta(days=1))
    second = add_member("Bob Ng", created_at=now)

    members = MembershipManager(db_session).refresh()
    assert [m.id for m in members] == [second.id, first.id]


def test_update_changes_status(db_session, add_member):
    member = add_member("Ann Lee")

    updated = MembershipManager(db_session).update(
        member.id,
        MemberIn(name="Ann Lee", email="ann.lee@example.com", phone="555-0101", status="inactive"),
    )

    assert updated.status == "inactive"
    assert updated.email == "ann.lee@example.com"
    assert updated.phone == "555-0101"


def test_get_missing_member(db_session):
    with pytest.raises(NotFoundError):
        MembershipManager(db_session).get("nope")


def test_search_scenario(db_session, add_member):
    add_member("Ann Lee", email="ann@example.com")
    add_member("Bob Ng", email="bob@example.com")

    membership = MembershipManager(db_session)
    membership.refresh()

    assert [m.name for m in membership.search("an")] == ["Ann Lee"]
    # Whitespace in the term is matched literally.
    assert membership.search("an ") == []
    assert [m.name for m in membership.search("n l")] == ["Ann Lee"]


def test_search_covers_email_and_phone(db_session, add_member):
    add_member("Ann Lee", email="ann@example.com", phone="555-0101")
    add_member("Bob Ng", email="bob@library.org", phone="555-0202")

    membership = MembershipManager(db_session)
    membership.refresh()

    assert [m.name for m in membership.search("LIBRARY.org")] == ["Bob Ng"]
    assert [m.name for m in membership.search("0101")] == ["Ann Lee"]


def test_delete_requires_confirmation(db_session, add_member):
    member = add_member()
    membership = MembershipManager(db_session)

    with pytest.raises(ConfirmationRequiredError):
        membership.delete(member.id, confirmed=False)
    assert len(membership.refresh()) == 1

    membership.delete(member.id, confirmed=True)
    assert membership.members == []


def test_delete_refused_while_member_holds_books(db_session, add_book, add_member):
    member = add_member()
    LoanManager(db_session).borrow(add_book().id, member.id, utctoday() + timedelta(days=5))

    with pytest.raises(ConflictError):
        MembershipManager(db_session).delete(member.id, confirmed=True)
