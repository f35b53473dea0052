from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from librarydesk.db.session import get_db
from librarydesk.services.transaction import store_message
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise HTTPException(status_code=503, detail=f"Store unreachable: {store_message(exc)}")
    return {"status": "ok", "store": "reachable"}
