from __future__ import annotations

from typing import NoReturn

from fastapi import Depends, HTTPException
from librarydesk.db.session import get_db
from librarydesk.services.catalog import CatalogManager
from librarydesk.services.errors import LibraryError
from librarydesk.services.loans import LoanManager
from librarydesk.services.membership import MembershipManager
from sqlalchemy.orm import Session


# One manager per request: each owns its list and loads it itself.
def get_catalog(db: Session = Depends(get_db)) -> CatalogManager:
    return CatalogManager(db)


def get_membership(db: Session = Depends(get_db)) -> MembershipManager:
    return MembershipManager(db)


def get_loans(db: Session = Depends(get_db)) -> LoanManager:
    return LoanManager(db)


def raise_http(exc: LibraryError) -> NoReturn:
    raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc
