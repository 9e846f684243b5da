"""
Engine construction and store helpers shared by both services' db modules.
"""
import logging
from typing import List

from sqlalchemy import Table, create_engine, event, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, pool_size: int = 5, max_overflow: int = 10, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine for a service database.

    SQLite gets the thread-sharing flag FastAPI needs and foreign key
    enforcement; other backends get a sized connection pool.
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        echo=echo,
    )


def ping(engine: Engine) -> bool:
    """
    Check if database connection is working.

    Returns:
        bool: True if connection is successful, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection check failed: {e}")
        return False


# Dialects whose INSERT supports ON CONFLICT DO NOTHING, the only ones the
# services are deployed on.
_CONFLICT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def insert_ignore(db: Session, table: Table, rows: List[dict]) -> int:
    """
    Insert rows into a link table, skipping any that already exist.

    Runs in the caller's transaction and does not commit.

    Returns:
        Number of rows actually inserted

    Raises:
        NotImplementedError: the bound database is neither PostgreSQL nor SQLite
    """
    if not rows:
        return 0

    dialect = db.get_bind().dialect.name
    dialect_insert = _CONFLICT_INSERTS.get(dialect)
    if dialect_insert is None:
        raise NotImplementedError(f"insert_ignore is not supported on {dialect}")

    result = db.execute(dialect_insert(table).values(rows).on_conflict_do_nothing())
    return result.rowcount
