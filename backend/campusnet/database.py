import logging

from sqlalchemy import create_engine, event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from campusnet.config import DATABASE_URL
from campusnet.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def make_engine(url: str, **kwargs):
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, **kwargs)
    if url.startswith("sqlite"):
        # SQLite ignores ON DELETE clauses unless foreign keys are switched on
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    return engine


engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

Base = declarative_base()


def commit_or_conflict(db: Session, message: str = "Record conflicts with existing data"):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("[DB] Integrity error: %s", e.orig)
        raise ConflictError(message) from e


def get_or_raise(db: Session, model, record_id: str, label: str | None = None):
    obj = db.get(model, record_id)
    if obj is None:
        raise NotFoundError(label or model.__name__, record_id)
    return obj


def apply_updates(obj, updates: dict):
    for field, value in updates.items():
        setattr(obj, field, value)
    return obj
