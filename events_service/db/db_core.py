"""Core database functionality and configuration.

This module provides database management with proper configuration,
connection pooling, and session handling. A single ``Database`` is built by
the application factory, connected during startup and handed to the stores.
"""

from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Generator

from sqlalchemy import create_engine, Engine, inspect, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..models import Base
from ..models.event import EventRecord  # noqa
from ..config.settings import Settings

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent.parent / 'data'

class DatabaseConfig:
    """Database configuration settings."""

    def __init__(
        self,
        url: Optional[str] = None,
        sqlite_path: Optional[Path] = None,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 5,
        pool_timeout: int = 5,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True
    ):
        """
        Initialize database configuration.

        Args:
            url: Full SQLAlchemy connection URL. Takes precedence over sqlite_path.
            sqlite_path: Path to SQLite database file (development fallback)
            echo: Whether to echo SQL statements
            pool_size: Size of the connection pool (connections kept warm)
            max_overflow: Maximum number of extra connections to allow temporarily
                        (total connections = pool_size + max_overflow)
            pool_timeout: Seconds to wait for an available connection
            pool_recycle: Seconds before connections are recycled (prevent stale)
            pool_pre_ping: Whether to ping connections before using them

        Raises:
            ValueError: If neither a URL nor a SQLite path is provided
        """
        if not url and not sqlite_path:
            raise ValueError("Either a database URL or a SQLite path must be provided")

        self.url = url
        self.sqlite_path = sqlite_path
        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.pool_pre_ping = pool_pre_ping

    @classmethod
    def from_settings(cls, settings: Settings) -> 'DatabaseConfig':
        """
        Build a configuration from service settings.

        In production DATABASE_URL is mandatory; in development a SQLite file
        named after DB_NAME is used when no URL is set.
        """
        settings.validate()
        if settings.database_url:
            return cls(url=settings.database_url)
        return cls(sqlite_path=DATA_DIR / f'{settings.db_name}.db')

    @property
    def connection_url(self) -> str:
        """Get the database connection URL."""
        if self.url:
            return self.url
        return f"sqlite:///{self.sqlite_path}"

    @property
    def is_sqlite(self) -> bool:
        return self.connection_url.startswith('sqlite')

    def get_engine_args(self) -> Dict[str, Any]:
        """Get SQLAlchemy engine arguments based on configuration."""
        args = {"echo": self.echo}

        # SQLite-specific configuration
        if self.is_sqlite:
            args["connect_args"] = {"check_same_thread": False}
            args["poolclass"] = StaticPool

        # Server database configuration
        else:
            args.update({
                "pool_size": self.pool_size,
                "max_overflow": self.max_overflow,
                "pool_timeout": self.pool_timeout,
                "pool_recycle": self.pool_recycle,
                "pool_pre_ping": self.pool_pre_ping
            })

        return args

class DatabaseError(Exception):
    """Base exception for database-related errors."""
    pass

class ConnectionError(DatabaseError):
    """Raised when there are issues connecting to the database."""
    pass

class SessionError(DatabaseError):
    """Raised when there are issues with database sessions."""
    pass

class Database:
    """Owns the engine, its connection pool and the session factory."""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.engine: Optional[Engine] = None
        self._session_factory = sessionmaker(expire_on_commit=False)

    @property
    def is_connected(self) -> bool:
        return self.engine is not None

    def connect(self) -> None:
        """
        Create the engine, verify the database is reachable and ensure the
        schema exists.

        Raises:
            ConnectionError: If the database cannot be reached
            DatabaseError: If the schema cannot be created
        """
        if self.engine:
            logger.info("Already connected to database")
            return

        try:
            if self.config.sqlite_path and not self.config.url:
                Path(self.config.sqlite_path).parent.mkdir(parents=True, exist_ok=True)
            engine = create_engine(
                self.config.connection_url,
                **self.config.get_engine_args()
            )
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            raise ConnectionError(f"Failed to connect to database: {e}") from e

        self.engine = engine
        self._session_factory.configure(bind=self.engine)
        logger.info(f"Connected to database: {self.engine.url.render_as_string(hide_password=True)}")

        self.ensure_tables_exist()

    def ensure_tables_exist(self) -> None:
        """Ensure all required database tables exist."""
        if not self.engine:
            raise ConnectionError("Database engine not initialized")

        try:
            inspector = inspect(self.engine)
            existing_tables = inspector.get_table_names()
            required_tables = set(Base.metadata.tables)

            if not required_tables.issubset(existing_tables):
                logger.info("Some tables missing, initializing database schema")
                Base.metadata.create_all(self.engine)
                logger.info("Database schema initialized successfully")
        except Exception as e:
            raise DatabaseError(f"Failed to verify/create database schema: {e}") from e

    def close(self) -> None:
        """Dispose of the connection pool. Safe to call more than once."""
        if self.engine:
            self.engine.dispose()
            self.engine = None
            logger.info("Database connection closed")

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Example:
            with database.session() as session:
                record = session.get(EventRecord, event_id)
                record.name = "New Name"
                # No need to call commit - it's handled automatically

        Raises:
            ConnectionError: If called before connect()
            SessionError: If there are issues with the session
        """
        if not self.engine:
            raise ConnectionError("Database not initialized. Call connect() first.")

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            raise SessionError(f"Database session error: {e}") from e
        finally:
            session.close()
