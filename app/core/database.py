from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator, Iterator
import logging
from app.core.config import settings
from app.core.exceptions import BookingError, InfrastructureError

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_pre_ping": True,  # Verify connections before using
    }


engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    **_engine_options(settings.DATABASE_URL)
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.
    Automatically closes session after use.
    
    Usage:
        @router.get("/venues")
        def list_venues(db: Session = Depends(get_db)):
            return VenueService(db).list_venues()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """
    Initialize database - create all tables.
    Should be called on application startup.
    """
    import app.models.venue  # noqa: F401
    import app.models.event  # noqa: F401
    Base.metadata.create_all(bind=engine)


def drop_db() -> None:
    """
    Drop all tables - USE WITH CAUTION!
    Only for development/testing purposes.
    """
    Base.metadata.drop_all(bind=engine)


@contextmanager
def write_scope(db: Session, action: str) -> Iterator[None]:
    """
    Roll back on any failure inside a check-then-write sequence.

    Business errors propagate unchanged; SQLAlchemy errors are translated to
    InfrastructureError. Rolling back also releases any row lock taken with
    ``with_for_update()`` earlier in the block.
    """
    try:
        yield
    except BookingError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to {action}: {str(e)}")
        raise InfrastructureError(f"Failed to {action}", original=e) from e
    except Exception:
        db.rollback()
        raise
