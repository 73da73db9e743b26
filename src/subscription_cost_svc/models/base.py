import threading

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from subscription_cost_svc.config import get_settings

Base = declarative_base()

_engine = None
_SessionLocal = None
# Sync dependencies run in a threadpool; first requests may race here
_init_lock = threading.Lock()


def get_engine():
    """Get or create the SQLAlchemy engine."""
    global _engine
    if _engine is None:
        with _init_lock:
            if _engine is None:
                _engine = create_engine(get_settings().DATABASE_URL, pool_pre_ping=True)
    return _engine


def get_session_factory():
    global _SessionLocal
    if _SessionLocal is None:
        engine = get_engine()
        with _init_lock:
            if _SessionLocal is None:
                _SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    return _SessionLocal


def get_db() -> Session:
    """
    FastAPI dependency yielding a session that is closed after the request.
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    # Register models on Base.metadata before creating tables
    from subscription_cost_svc.models import subscription  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
