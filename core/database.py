import logging
from contextlib import contextmanager
from typing import Generator, Iterator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

logger = logging.getLogger(__name__)


# ============================================================
# ✅ Database resource (engine + connection pool)
# ============================================================
class Database:
    """
    Owns the SQLAlchemy engine and its connection pool.

    One instance is built at start-up and attached to ``app.state.db``;
    request handlers borrow a session through :func:`get_session`.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 20,
        pool_recycle: int = 30,
        connect_timeout: int = 2,
        echo: bool = False,
    ):
        self.url = url
        self.engine = self._build_engine(url, pool_size, pool_recycle, connect_timeout, echo)

    @staticmethod
    def _build_engine(url: str, pool_size: int, pool_recycle: int, connect_timeout: int, echo: bool) -> Engine:
        if url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            # In-memory databases only live as long as their single connection
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            engine = create_engine(url, echo=echo, **kwargs)
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
            logger.warning("Using SQLite database: %s", url)
            return engine

        logger.info("Using database from environment (pool_size=%s)", pool_size)
        return create_engine(
            url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=0,
            pool_recycle=pool_recycle,
            pool_pre_ping=True,
            connect_args={"connect_timeout": connect_timeout},
        )

    @classmethod
    def from_settings(cls, settings) -> "Database":
        return cls(
            settings.DATABASE_URL,
            pool_size=settings.DB_POOL_SIZE,
            pool_recycle=settings.DB_POOL_RECYCLE_SECONDS,
            connect_timeout=settings.DB_CONNECT_TIMEOUT_SECONDS,
        )

    def create_all(self) -> None:
        """Create all tables declared on SQLModel metadata."""
        # Register every table before create_all
        import models.models  # noqa: F401

        try:
            SQLModel.metadata.create_all(self.engine)
            logger.info("✅ All database tables created successfully.")
        except Exception as e:
            logger.error("❌ Failed to create tables: %s", e)
            raise

    @contextmanager
    def session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session

    def dispose(self) -> None:
        self.engine.dispose()


@contextmanager
def transaction(session: Session) -> Iterator[Session]:
    """Commit the block as one unit; roll back and re-raise on any error."""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# ============================================================
# ✅ Dependency: FastAPI session generator
# ============================================================
def get_session(request: Request) -> Generator[Session, None, None]:
    """
    Provides a SQLModel Session bound to the application's pool.
    Closes automatically after request completes.
    """
    with request.app.state.db.session() as session:
        yield session
