"""Database engine and session factory used across the application."""

from loguru import logger
from sqlalchemy import Engine, event, text
from sqlmodel import Session, SQLModel, create_engine

from src.lingomate.runtime.config.config_data import DatabaseConfig


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(db_config: DatabaseConfig) -> Engine:
    """Create an engine tuned for the configured backend."""
    engine_kwargs: dict = {
        "pool_pre_ping": True,  # Validate connections before use
        "echo": False,
    }

    if db_config.is_sqlite:
        engine_kwargs["connect_args"] = {
            "check_same_thread": False,  # Request handlers run in a threadpool
            "timeout": 20,  # Lock timeout
        }
    else:
        engine_kwargs.update(
            {
                "pool_size": db_config.pool_size,
                "max_overflow": db_config.max_overflow,
                "pool_timeout": db_config.pool_timeout,
                "pool_recycle": db_config.pool_recycle,
            }
        )

    engine = create_engine(db_config.connection_string, **engine_kwargs)
    if db_config.is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class DbSessionService:
    def __init__(self, db_config: DatabaseConfig | None = None, engine: Engine | None = None):
        """Initialize the shared database engine and session factory."""
        if engine is None:
            logger.info("Setting up database engine and session factory")
            engine = build_engine(db_config or DatabaseConfig())
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_all(self) -> None:
        """Create all database tables."""
        from src.lingomate.entities.core.friend_edge import FriendEdgeTable  # noqa: F401
        from src.lingomate.entities.core.user import UserTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Entities are read after commit
            autoflush=True,
        )

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except Exception as e:
            logger.error(
                "Database health check failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

    def dispose(self) -> None:
        self._engine.dispose()
