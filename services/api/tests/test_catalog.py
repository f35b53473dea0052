from datetime import datetime, timedelta, timezone

import pytest
from librarydesk.models import BorrowingRecord
from librarydesk.models.base import utctoday
from librarydesk.schemas.books import BookIn
from librarydesk.services.catalog import CatalogManager
from librarydesk.services.errors import (
    ConfirmationRequiredError,
    ConflictError,
    NotFoundError,
)
from librarydesk.services.loans import LoanManager
from sqlalchemy import select


def _book_in(**overrides) -> BookIn:
    fields = {
        "title": "The Left Hand of Darkness",
        "author": "Ursula K. Le Guin",
        "isbn": "9780441478125",
        "category": "Science Fiction",
        "total_copies": 3,
        "publication_year": 1969,
    }
    fields.update(overrides)
    return BookIn(**fields)


def test_create_sets_available_to_total(db_session):
    catalog = CatalogManager(db_session)
    book = catalog.create(_book_in(total_copies=4))

    assert book.total_copies == 4
    assert book.available_copies == 4
    assert [b.id for b in catalog.books] == [book.id]


def test_list_is_newest_first(db_session, add_book):
    now = datetime.now(timezone.utc)
    old = add_book("Old", created_at=now - timedelta(days=2))
    new = add_book("New", created_at=now)
    mid = add_book("Mid", created_at=now - timedelta(days=1))

    books = CatalogManager(db_session).refresh()
    assert [b.id for b in books] == [new.id, mid.id, old.id]


def test_update_overwrites_fields_and_stamps_time(db_session, add_book):
    book = add_book("Dune", total=2)
    before = book.updated_at

    catalog = CatalogManager(db_session)
    updated = catalog.update(book.id, _book_in(title="Dune Messiah", total_copies=2))

    assert updated.title == "Dune Messiah"
    assert updated.author == "Ursula K. Le Guin"
    assert updated.publication_year == 1969
    assert updated.available_copies == 2
    assert updated.updated_at >= before


def test_update_shifts_available_by_total_delta(db_session, add_book, add_member):
    book = add_book("Dune", total=3)
    member = add_member()
    LoanManager(db_session).borrow(book.id, member.id, utctoday() + timedelta(days=7))

    catalog = CatalogManager(db_session)
    grown = catalog.update(book.id, _book_in(total_copies=5))
    assert (grown.total_copies, grown.available_copies) == (5, 4)

    shrunk = catalog.update(book.id, _book_in(total_copies=1))
    assert (shrunk.total_copies, shrunk.available_copies) == (1, 0)


def test_update_rejects_total_below_copies_on_loan(db_session, add_book, add_member):
    book = add_book("Dune", total=2)
    loans = LoanManager(db_session)
    due = utctoday() + timedelta(days=7)
    loans.borrow(book.id, add_member("Ann Lee").id, due)
    loans.borrow(book.id, add_member("Bob Ng").id, due)

    with pytest.raises(ConflictError):
        CatalogManager(db_session).update(book.id, _book_in(total_copies=1))

    db_session.refresh(book)
    assert (book.total_copies, book.available_copies) == (2, 0)


def test_update_missing_book_is_not_found(db_session):
    with pytest.raises(NotFoundError):
        CatalogManager(db_session).update("missing", _book_in())


def test_delete_requires_confirmation(db_session, add_book):
    book = add_book()
    catalog = CatalogManager(db_session)

    with pytest.raises(ConfirmationRequiredError):
        catalog.delete(book.id, confirmed=False)

    assert [b.id for b in catalog.refresh()] == [book.id]

    catalog.delete(book.id, confirmed=True)
    assert catalog.books == []


def test_delete_refused_while_copies_on_loan(db_session, add_book, add_member):
    book = add_book(total=2)
    LoanManager(db_session).borrow(book.id, add_member().id, utctoday() + timedelta(days=3))

    with pytest.raises(ConflictError):
        CatalogManager(db_session).delete(book.id, confirmed=True)


def test_delete_removes_returned_loan_history(db_session, add_book, add_member):
    book = add_book()
    loans = LoanManager(db_session)
    record = loans.borrow(book.id, add_member().id, utctoday() + timedelta(days=3))
    loans.return_loan(record.id, confirmed=True)

    CatalogManager(db_session).delete(book.id, confirmed=True)

    remaining = db_session.execute(select(BorrowingRecord)).scalars().all()
    assert remaining == []


def test_search_matches_any_field_case_insensitively(db_session, add_book):
    add_book("Dune", author="Frank Herbert", isbn="111", category="Science Fiction")
    add_book("Emma", author="Jane Austen", isbn="222", category="Classics")
    add_book("Neuromancer", author="William Gibson", isbn="333", category="Cyberpunk")

    catalog = CatalogManager(db_session)
    catalog.refresh()

    assert {b.title for b in catalog.search("AUSTEN")} == {"Emma"}
    assert {b.title for b in catalog.search("fiction")} == {"Dune"}
    assert {b.title for b in catalog.search("33")} == {"Neuromancer"}
    assert {b.title for b in catalog.search("")} == {"Dune", "Emma", "Neuromancer"}
    assert catalog.search("tolkien") == []


def test_search_only_looks_at_loaded_list(db_session, add_book):
    catalog = CatalogManager(db_session)
    catalog.refresh()
    add_book("Dune")

    # Not reloaded yet, so the new row is invisible to search.
    assert catalog.search("dune") == []
    catalog.refresh()
    assert len(catalog.search("dune")) == 1
