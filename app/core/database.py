import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    kwargs = {"pool_pre_ping": True}  # Verify connections before using them
    if url.startswith("sqlite"):
        # FastAPI runs sync endpoints in a threadpool; the busy timeout makes
        # a writer wait for the SQLite lock instead of failing immediately.
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": settings.DB_BUSY_TIMEOUT,
        }
    else:
        kwargs["pool_size"] = 10  # Connection pool size
        kwargs["max_overflow"] = 20  # Allow up to 20 connections beyond pool_size
    return kwargs


# Create SQLAlchemy engine
engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    **_engine_kwargs(settings.SQLALCHEMY_DATABASE_URI)
)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)

    The session checks a connection out of the engine pool on first use and
    returns it when closed, on success and error paths alike.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """
    Create the users, jobs and applications tables if they do not exist.

    Safe to call on every startup: existing tables are left untouched.
    Errors propagate so the caller can refuse to start serving.
    """
    from app.models import user, job, application  # noqa: F401  register tables

    bind = bind if bind is not None else engine
    Base.metadata.create_all(bind=bind)
    logger.info("Schema ready: %s", ", ".join(sorted(Base.metadata.tables)))


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the integrity error comes from a UNIQUE constraint."""
    message = str(exc.orig).lower()
    return "unique" in message or "duplicate key" in message


def is_busy(exc: OperationalError) -> bool:
    """True when SQLite (or another backend) reports a locked/busy database."""
    message = str(exc.orig).lower()
    return "locked" in message or "busy" in message
