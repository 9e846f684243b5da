from typing import Generator
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from ..core.claims import DEFAULT_GROUP_ID, DEFAULT_GROUP_NAME
from ..core.database import build_engine, ping
from .config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

engine = build_engine(
    settings.DATABASE_URL,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    echo=settings.LOG_LEVEL.upper() == "DEBUG",
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def init_db():
    """Create tables and seed the default group. Safe to call repeatedly."""
    from .models import Group  # Import here to avoid circular dependency

    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if db.get(Group, DEFAULT_GROUP_ID) is None:
            db.add(Group(id=DEFAULT_GROUP_ID, name=DEFAULT_GROUP_NAME))
            db.commit()
            logger.info("Seeded default group %s", DEFAULT_GROUP_ID)
    except IntegrityError:
        # Seeded concurrently by another worker
        db.rollback()
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> bool:
    return ping(engine)
