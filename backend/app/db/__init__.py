import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.config import settings

log = logging.getLogger("inventory.db")

DATABASE_URL = settings.DATABASE_URL
# sqlite connections are handed between the threadpool workers FastAPI uses for sync routes
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, future=True, echo=False, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(reset: bool = None):
    """
    Initialize DB schema.

    Behavior:
      - reset=True, or RESET_DB env var set to 1/true/yes when reset is None:
        drop & recreate the items table (ids start again at 1).
      - Otherwise create missing tables and leave existing rows in place.
    """
    # model modules must be imported so Base.metadata is populated
    import app.models.item  # noqa: F401

    if reset is None:
        reset = os.environ.get("RESET_DB", "false").lower() in ("1", "true", "yes")

    if reset:
        log.info("Resetting database schema at %s", DATABASE_URL)
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    log.info("Database initialized.")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
