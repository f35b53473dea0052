from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from librarydesk.services.errors import LibraryError, StoreError
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def store_message(exc: SQLAlchemyError) -> str:
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


@contextmanager
def store_write(db: Session, action: str) -> Iterator[None]:
    """Run the enclosed writes as one transaction.

    Commits when the block finishes; any error rolls back every write made
    inside it. Store failures are re-raised as StoreError carrying the
    store's own message, e.g. "Error adding book: NOT NULL constraint failed".
    """
    try:
        yield
        db.commit()
    except LibraryError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("store write failed while %s", action)
        raise StoreError(f"Error {action}: {store_message(exc)}") from exc


@contextmanager
def store_read(db: Session, action: str) -> Iterator[None]:
    """Map store failures during reads to StoreError, like store_write."""
    try:
        yield
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("store read failed while %s", action)
        raise StoreError(f"Error {action}: {store_message(exc)}") from exc
