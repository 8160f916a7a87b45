"""Async database engine and session lifecycle management.

A ``Database`` owns one SQLAlchemy async engine and its connection pool. The
application creates exactly one per app instance (see ``create_app``) and
hands it to request handlers through FastAPI dependencies, so there is no
module-level engine.

The pool is bounded by ``DatabaseConfig.pool_size`` + ``max_overflow``;
checkouts beyond that wait for ``pool_timeout`` seconds before failing.
The engine itself is created lazily on first use.
"""

import asyncio
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from weakref import WeakKeyDictionary

from loguru import logger
from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.engine.interfaces import DBAPICursor, ExecutionContext
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.core.config import DatabaseConfig, LogConfig
from src.core.constants import MILLISECONDS_PER_SECOND
from src.core.context import RequestContext
from src.core.error_context import sanitize_sql_params
from src.infrastructure.constants import (
    COMMAND_TIMEOUT_SECONDS,
    MAX_LOGGED_STATEMENT_LENGTH,
    POOL_RECYCLE_SECONDS,
)


class SlowQueryListener:
    """Cursor event listener that warns about statements over a threshold.

    Args:
        threshold_ms: Duration at or above which a statement is logged.
    """

    def __init__(self, threshold_ms: int) -> None:
        self.threshold_ms = threshold_ms
        self._start_times: WeakKeyDictionary[ExecutionContext, float] = (
            WeakKeyDictionary()
        )

    def before_cursor_execute(
        self,
        _conn: Connection,
        _cursor: DBAPICursor,
        _statement: str,
        _parameters: Any,  # noqa: ANN401
        context: ExecutionContext,
        _executemany: bool,
    ) -> None:
        """Record the statement start time."""
        self._start_times[context] = time.perf_counter()

    def after_cursor_execute(
        self,
        _conn: Connection,
        cursor: DBAPICursor,
        statement: str,
        parameters: Any,  # noqa: ANN401
        context: ExecutionContext,
        _executemany: bool,
    ) -> None:
        """Log the statement if it ran longer than the threshold."""
        start_time = self._start_times.pop(context, None)
        if start_time is None:
            return

        duration_ms = (time.perf_counter() - start_time) * MILLISECONDS_PER_SECOND
        if duration_ms < self.threshold_ms:
            return

        clean_statement = " ".join(statement.split())[:MAX_LOGGED_STATEMENT_LENGTH]
        logger.warning(
            "Slow query detected: {:.2f}ms",
            duration_ms,
            query=clean_statement,
            duration_ms=round(duration_ms, 2),
            rows_affected=getattr(cursor, "rowcount", -1),
            parameters=sanitize_sql_params(parameters),
            correlation_id=RequestContext.get_correlation_id(),
            threshold_ms=self.threshold_ms,
        )

    def attach(self, engine: AsyncEngine) -> None:
        """Register both hooks on the engine's sync core."""
        event.listen(
            engine.sync_engine, "before_cursor_execute", self.before_cursor_execute
        )
        event.listen(
            engine.sync_engine, "after_cursor_execute", self.after_cursor_execute
        )


def create_database_engine(
    config: DatabaseConfig, log_config: LogConfig | None = None
) -> AsyncEngine:
    """Create an async engine with a bounded connection pool.

    Args:
        config: Database and pool settings.
        log_config: Logging settings; enables the slow query listener when
            ``enable_sql_logging`` is set.

    Returns:
        AsyncEngine: Configured async engine instance.
    """
    engine = create_async_engine(
        config.database_url,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_pre_ping=config.pool_pre_ping,
        pool_recycle=POOL_RECYCLE_SECONDS,
        echo=config.echo,
        connect_args={"command_timeout": COMMAND_TIMEOUT_SECONDS},
    )

    sql_logging = bool(log_config and log_config.enable_sql_logging)
    if log_config and sql_logging:
        SlowQueryListener(log_config.slow_query_threshold_ms).attach(engine)

    logger.info(
        "Created database engine - pool_size: {}, max_overflow: {}, sql_logging: {}",
        config.pool_size,
        config.max_overflow,
        sql_logging,
    )
    return engine


class Database:
    """Storage handle shared by all requests of one application instance.

    Args:
        config: Database and pool settings.
        log_config: Logging settings passed to the engine.
    """

    def __init__(
        self, config: DatabaseConfig, log_config: LogConfig | None = None
    ) -> None:
        self.config = config
        self.log_config = log_config
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = asyncio.Lock()

    @property
    def engine(self) -> AsyncEngine:
        """The async engine, created on first access."""
        if self._engine is None:
            self._engine = create_database_engine(self.config, self.log_config)
        return self._engine

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """The session factory bound to ``engine``."""
        if self._session_factory is None:
            self._session_factory = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_factory

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """Open a session, committing on success and rolling back on error.

        Yields:
            AsyncSession: Session for one unit of work.

        Example:
            async with database.session() as session:
                store = AnimalStore(session)
                await store.delete(3)
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                logger.debug("Database session rolled back due to error")
                raise

    async def check_connection(self) -> tuple[bool, str | None]:
        """Run ``SELECT 1`` to check database availability.

        Returns:
            tuple[bool, str | None]: Success flag and the error text on failure.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            return False, str(e)
        return True, None

    def pool_status(self) -> dict[str, int]:
        """Current pool usage, for health reporting."""
        pool: Any = self.engine.pool
        return {
            "size": pool.size(),
            "checked_out": pool.checkedout(),
            "overflow": pool.overflow(),
        }

    async def close(self) -> None:
        """Dispose of the engine and all pooled connections."""
        async with self._lock:
            if self._engine is not None:
                await self._engine.dispose()
                logger.info("Database engine disposed")
                self._engine = None
                self._session_factory = None
