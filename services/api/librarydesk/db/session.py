from __future__ import annotations

import logging
from functools import lru_cache
from typing import Generator

from librarydesk.core.config import settings
from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


class StoreConfigError(RuntimeError):
    """Raised when the store URL or access key is missing."""


def build_engine(store_url: str | None, store_key: str | None) -> Engine:
    if not store_url or not store_key:
        missing = [
            name
            for name, value in (
                ("LIBRARY_STORE_URL", store_url),
                ("LIBRARY_STORE_KEY", store_key),
            )
            if not value
        ]
        raise StoreConfigError(f"Store client not configured; missing {', '.join(missing)}")

    url = make_url(store_url)
    if url.get_backend_name() == "sqlite":
        # File/memory stores have no credential; the key is still required above.
        return create_engine(url, connect_args={"check_same_thread": False})

    # The access key is the store password; it never lives in the URL setting.
    url = url.set(password=store_key)
    return create_engine(url, pool_pre_ping=True)


@lru_cache
def get_engine() -> Engine:
    engine = build_engine(settings.store_url, settings.store_key)
    logger.info("Store client ready (%s)", engine.url.render_as_string(hide_password=True))
    return engine


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def get_db() -> Generator[Session, None, None]:
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
