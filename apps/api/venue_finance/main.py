from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from venue_finance import models  # noqa: F401  (registers every table on Base.metadata)
from venue_finance.core.config import settings
from venue_finance.db.session import engine
from venue_finance.models.base import Base
from venue_finance.routes import business_hours, expenses, financial_postings, financial_reports, reports
from venue_finance.services.errors import FinanceError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
SERVICE = "venue-finance-api"
VERSION = "1.0.0"

DEV_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")


def _cors_origins() -> list[str]:
    origins = set(DEV_ORIGINS)
    if settings.FRONTEND_URL and settings.FRONTEND_URL.strip():
        origins.add(settings.FRONTEND_URL.strip())
    return sorted(origins)


def _ensure_tables() -> None:
    # dev shortcut; deployed databases are migrated with alembic
    if os.getenv("RUN_CREATE_ALL", "0") != "1":
        return
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Tables ensured via create_all")
    except SQLAlchemyError:
        logger.exception("create_all failed; starting without it")


async def _finance_error(request: Request, exc: FinanceError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def _health() -> dict:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        return {"status": "error", "service": SERVICE, "database": "disconnected"}
    return {"status": "ok", "service": SERVICE, "version": VERSION, "database": "connected"}


def create_app() -> FastAPI:
    _ensure_tables()

    application = FastAPI(title="Venue Finance API", version=VERSION)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(FinanceError, _finance_error)
    application.add_api_route("/health", _health, methods=["GET", "HEAD"])

    for module in (financial_reports, financial_postings, expenses, reports, business_hours):
        application.include_router(module.router, prefix=API_PREFIX)
    return application


app = create_app()
