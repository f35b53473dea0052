from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class BookIn(BaseModel):
    """Editable book fields; `available_copies` is never submitted directly."""

    title: str = Field(min_length=1, max_length=500)
    author: str = Field(min_length=1, max_length=300)
    isbn: str = Field(min_length=1, max_length=20)
    category: str = Field(min_length=1, max_length=120)
    total_copies: int = Field(default=1, ge=1)
    publication_year: int | None = Field(default=None, ge=0, le=9999)


class BookOut(BaseModel):
    id: str
    title: str
    author: str
    isbn: str
    category: str
    total_copies: int
    available_copies: int
    publication_year: int | None = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
