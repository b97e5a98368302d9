"""Skillcheck: FastAPI application entry point."""

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import inspect, text

from skillcheck import models  # noqa: F401  (registers tables on Base.metadata)
from skillcheck.config import settings
from skillcheck.database import Base, SessionLocal, engine
from skillcheck.errors import PersistenceError
from skillcheck.middleware.rate_limit import limiter
from skillcheck.routers import auth, cv, dashboard, progress, recommendations, tests
from skillcheck.services import store
from skillcheck.services.seed import seed_catalog

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create all tables on startup
Base.metadata.create_all(bind=engine)


def _add_column_if_missing(table: str, column: str, col_type: str):
    """Add a column to an existing table if it doesn't already exist."""
    existing_cols = {c["name"] for c in inspect(engine).get_columns(table)}
    if column not in existing_cols:
        with engine.begin() as conn:
            conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}"))
        logger.info("Added column %s.%s", table, column)


_add_column_if_missing("skills", "seq", "INTEGER NOT NULL DEFAULT 0")

# ── CORS origins from env ────────────────────────────────────────────────────
_cors_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app = FastAPI(
    title="Skillcheck",
    description="Skills assessment: tests, skill tracking, levels and course recommendations.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    return JSONResponse(
        status_code=503,
        content={"detail": "Could not save changes, please try again"},
    )


# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(tests.router)
app.include_router(progress.router)
app.include_router(dashboard.router)
app.include_router(recommendations.router)
app.include_router(cv.router)


@app.on_event("startup")
def on_startup():
    """Create the upload directory and seed the default catalog."""
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)

    if not settings.SEED_CATALOG:
        return
    db = SessionLocal()
    try:
        with store.unit_of_work(db):
            added = seed_catalog(db)
        logger.info("Catalog ready (%d tests, %d recommendations added)", added["tests"], added["recommendations"])
    finally:
        db.close()


@app.get("/")
def root():
    return {
        "name": "Skillcheck API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "ok"}
