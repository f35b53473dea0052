from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from librarydesk.api.deps import get_catalog, raise_http
from librarydesk.api.rate_limit import rate_limiter
from librarydesk.core.config import settings
from librarydesk.schemas.books import BookIn, BookOut
from librarydesk.services.catalog import CatalogManager
from librarydesk.services.errors import LibraryError

router = APIRouter(prefix="/v1", tags=["books"])

WRITE_LIMIT = [
    Depends(
        rate_limiter(
            "book_writes",
            limit=settings.rate_limit_writes_per_window,
            window_seconds=settings.rate_limit_window_seconds,
        )
    )
]


@router.get("/books", response_model=list[BookOut])
def list_books(
    q: str | None = Query(default=None, description="Matches title, author, ISBN or category"),
    catalog: CatalogManager = Depends(get_catalog),
):
    try:
        catalog.refresh()
    except LibraryError as exc:
        raise_http(exc)
    return catalog.search(q)


@router.get("/books/{book_id}", response_model=BookOut)
def get_book(book_id: str, catalog: CatalogManager = Depends(get_catalog)):
    try:
        return catalog.get(book_id)
    except LibraryError as exc:
        raise_http(exc)


@router.post("/books", response_model=BookOut, status_code=201, dependencies=WRITE_LIMIT)
def create_book(payload: BookIn, catalog: CatalogManager = Depends(get_catalog)):
    try:
        return catalog.create(payload)
    except LibraryError as exc:
        raise_http(exc)


@router.put("/books/{book_id}", response_model=BookOut, dependencies=WRITE_LIMIT)
def update_book(
    book_id: str, payload: BookIn, catalog: CatalogManager = Depends(get_catalog)
):
    try:
        return catalog.update(book_id, payload)
    except LibraryError as exc:
        raise_http(exc)


@router.delete("/books/{book_id}", status_code=204, dependencies=WRITE_LIMIT)
def delete_book(
    book_id: str,
    confirm: bool = Query(default=False),
    catalog: CatalogManager = Depends(get_catalog),
) -> Response:
    try:
        catalog.delete(book_id, confirmed=confirm)
    except LibraryError as exc:
        raise_http(exc)
    return Response(status_code=204)
