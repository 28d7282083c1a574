import logging

from app.db import engine
from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

log = logging.getLogger("inventory.api")

router = APIRouter()


@router.get("/health", tags=["health"])
def health():
    db_ok = False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            db_ok = True
    except SQLAlchemyError:
        log.exception("health check: database unreachable")

    return {
        "status": "ok" if db_ok else "degraded",
        "db": db_ok,
    }
