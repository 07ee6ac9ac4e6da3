# backend/hoteldb/main.py
import logging
import os
from pathlib import Path
from typing import List

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from .apps.audit.router import router as audit_router
from .apps.stock.router import router as stock_router
from .database import WriteSessionLocal

logger = logging.getLogger(__name__)

ALEMBIC_DIR = Path(__file__).resolve().parent / "alembic"


def _allowed_origins() -> List[str]:
    """
    Parse CORS_ALLOWED_ORIGINS from env.

    Accepts comma-separated origins. If unset, defaults to local dev ports.
    """
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "")
    if raw:
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        if origins:
            return origins
    return [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
        "http://localhost:4173",
    ]


def _schema_strict_enabled() -> bool:
    return os.getenv("SCHEMA_STRICT", "").strip().lower() in {"1", "true", "yes", "on"}


def _enforce_schema_head_sync_if_configured() -> None:
    """
    Refuse to start when SCHEMA_STRICT is on and the database is not at the
    latest Alembic revision.
    """
    if not _schema_strict_enabled():
        return

    cfg = Config()
    cfg.set_main_option("script_location", str(ALEMBIC_DIR))
    heads = set(ScriptDirectory.from_config(cfg).get_heads())

    db = WriteSessionLocal()
    try:
        rows = db.execute(text("SELECT version_num FROM alembic_version")).fetchall()
    finally:
        db.close()
    current = {row[0] for row in rows}

    if current != heads:
        raise RuntimeError(
            f"Database schema is out of date (current={sorted(current)}, heads={sorted(heads)}). "
            "Run `alembic upgrade head` before starting the API."
        )
    logger.info("Schema preflight passed", extra={"heads": sorted(heads)})


app = FastAPI(title="Hotel Stock Ledger API", version="1.0.0")
cors_origins = _allowed_origins()
allow_credentials = "*" not in cors_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _schema_preflight() -> None:
    _enforce_schema_head_sync_if_configured()


@app.get("/", tags=["health"])
def read_root():
    return {"status": "ok", "message": "Hotel stock ledger backend is running"}


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


app.include_router(stock_router)
app.include_router(audit_router)
