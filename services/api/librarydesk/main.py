from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from librarydesk.api.router import api_router
from librarydesk.core.config import settings
from librarydesk.core.logging import configure_logging
from librarydesk.core.otel import init_otel, instrument_engine
from librarydesk.db.session import get_engine
from librarydesk.middleware.request_id import RequestIdMiddleware

configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fails fast with StoreConfigError when the store URL or key is missing.
    instrument_engine(get_engine())
    yield


app = FastAPI(title=settings.api_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)

app.include_router(api_router)

init_otel(app)
