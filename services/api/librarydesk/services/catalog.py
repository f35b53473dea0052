from __future__ import annotations

import logging

from librarydesk.crud.books import (
    adjust_available_copies,
    delete_book,
    get_book,
    insert_book,
    list_books,
    update_book,
)
from librarydesk.crud.borrowing_records import count_outstanding
from librarydesk.models.book import Book
from librarydesk.schemas.books import BookIn
from librarydesk.services.errors import (
    ConfirmationRequiredError,
    ConflictError,
    NotFoundError,
)
from librarydesk.services.search import filter_loaded
from librarydesk.services.transaction import store_read, store_write
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("title", "author", "isbn", "category")


class CatalogManager:
    """Book CRUD plus in-memory search over the last loaded list.

    `books` is owned by this instance and replaced wholesale by `refresh()`,
    which every mutation calls once it has committed.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.books: list[Book] = []

    def refresh(self) -> list[Book]:
        with store_read(self.db, "loading books"):
            self.books = list_books(self.db)
        return self.books

    def search(self, term: str | None) -> list[Book]:
        return filter_loaded(self.books, term, *SEARCH_FIELDS)

    def get(self, book_id: str) -> Book:
        with store_read(self.db, "loading book"):
            book = get_book(self.db, book_id=book_id)
        if book is None:
            raise NotFoundError("Book not found")
        return book

    def create(self, payload: BookIn) -> Book:
        fields = payload.model_dump()
        with store_write(self.db, "adding book"):
            book = insert_book(self.db, **fields, available_copies=payload.total_copies)
        self.refresh()
        return book

    def update(self, book_id: str, payload: BookIn) -> Book:
        book = self.get(book_id)
        delta = payload.total_copies - book.total_copies

        if delta < 0:
            with store_read(self.db, "counting loans"):
                on_loan = count_outstanding(self.db, book_id=book_id)
            if payload.total_copies < on_loan:
                raise ConflictError(
                    f"total_copies cannot be lower than the {on_loan} copies on loan"
                )

        with store_write(self.db, "updating book"):
            update_book(self.db, book=book, patch=payload.model_dump())
            if delta:
                adjust_available_copies(self.db, book_id=book_id, delta=delta)
        self.refresh()
        return book

    def delete(self, book_id: str, *, confirmed: bool) -> None:
        if not confirmed:
            raise ConfirmationRequiredError("Deleting a book requires confirmation")
        book = self.get(book_id)

        with store_read(self.db, "counting loans"):
            on_loan = count_outstanding(self.db, book_id=book_id)
        if on_loan:
            raise ConflictError(f"Book has {on_loan} copies on loan and cannot be deleted")

        with store_write(self.db, "deleting book"):
            delete_book(self.db, book=book)
        logger.info("book deleted", extra={"book_id": book_id})
        self.refresh()
