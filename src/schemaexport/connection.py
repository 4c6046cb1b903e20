"""
Destination connection handling with SQLAlchemy.

This module provides:
1. Connection descriptor validation and URL construction
2. Engine creation and management through a thread-safe registry
3. The `ConnectionWrapper` class around the raw DBAPI connection

Engines use NullPool: each export opens one fresh driver connection and
closes it when done, so an abandoned transaction is discarded with it.
"""
import atexit
import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from typing import Any, Self

import sqlalchemy as sa
from schemaexport.exceptions import ConfigurationError
from schemaexport.options import ExportOptions
from schemaexport.strategy import DatabaseStrategy, get_strategy
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool

__all__ = [
    'ConnectionWrapper',
    'connect',
    'create_url',
    'create_file_url',
    'get_engine_for_url',
    'dispose_engine',
    'dispose_all_engines',
]

logger = logging.getLogger(__name__)

_engine_registry: dict[str, Engine] = {}
_engine_registry_lock = threading.RLock()


def _require_target(target: Any, what: str) -> None:
    if target is None or (isinstance(target, str) and not target.strip()):
        raise ConfigurationError(f'{what} is required.')


def create_url(target: 'str | sa.URL', options: ExportOptions) -> sa.URL:
    """Validate a connection descriptor and convert it to a SQLAlchemy URL.

    Raises
        ConfigurationError: target is empty, unparsable or for another dialect
    """
    _require_target(target, 'Connection string')
    strategy = get_strategy(options.drivername)
    try:
        return strategy.build_connection_url(target)
    except sa.exc.ArgumentError as e:
        raise ConfigurationError(f'Invalid connection string {target!r}: {e}') from e


def create_file_url(path: str, options: ExportOptions, create_if_missing: bool = True) -> sa.URL:
    """Convert a database file path to a SQLAlchemy URL.
    """
    _require_target(path, 'File path')
    strategy = get_strategy(options.drivername)
    return strategy.build_file_url(str(path), create_if_missing=create_if_missing)


def get_engine_for_url(url: sa.URL,
                       engine_factory: Callable[..., Engine] = sa.create_engine,
                       **kwargs: Any) -> Engine:
    """Get or create a SQLAlchemy engine for the given URL.
    """
    key = url.render_as_string(hide_password=False)

    with _engine_registry_lock:
        if key in _engine_registry:
            logger.debug(f'Using existing engine for {url.get_backend_name()}')
            return _engine_registry[key]

        engine_kwargs: dict[str, Any] = {'echo': False, 'poolclass': NullPool}
        engine_kwargs.update(kwargs)

        engine = engine_factory(url, **engine_kwargs)

        _engine_registry[key] = engine
        logger.debug(f'Created new engine for {url.get_backend_name()}')

        return engine


def dispose_engine(url: sa.URL) -> None:
    """Dispose the engine registered for a URL and drop it from the registry.
    """
    key = url.render_as_string(hide_password=False)
    with _engine_registry_lock:
        engine = _engine_registry.pop(key, None)
    if engine is not None:
        engine.dispose()
        logger.debug(f'Disposed engine for {url.get_backend_name()}')


def dispose_all_engines() -> None:
    """Dispose all engines in the registry.
    """
    with _engine_registry_lock:
        for engine in _engine_registry.values():
            engine.dispose()
        _engine_registry.clear()
        logger.debug('All export engines disposed')


atexit.register(dispose_all_engines)


class ConnectionWrapper:
    """Wraps a pooled DBAPI connection together with its dialect strategy.

    Supports the context manager protocol; leaving the block closes the
    driver connection, discarding any uncommitted transaction.
    """

    def __init__(self, dbapi_connection: Any, strategy: DatabaseStrategy,
                 options: ExportOptions) -> None:
        self.dbapi_connection = dbapi_connection
        self.strategy = strategy
        self.options = options

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None,
                 exc_tb: Any | None) -> None:
        self.close()
        logger.debug('Closed connection via context manager')

    @property
    def driver_connection(self) -> Any:
        """The underlying driver connection (e.g. `sqlite3.Connection`)."""
        return getattr(self.dbapi_connection, 'driver_connection', self.dbapi_connection)

    def cursor(self) -> Any:
        return self.driver_connection.cursor()

    def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Execute one statement and return the affected row count."""
        logger.debug(f'Executing: {sql}')
        cursor = self.cursor()
        try:
            cursor.execute(sql, params)
            return cursor.rowcount
        finally:
            cursor.close()

    def executemany(self, sql: str, rows: Iterable[Sequence[Any]]) -> int:
        """Execute one statement per parameter row.

        The statement is compiled once and re-bound for every row, in order.
        """
        logger.debug(f'Executing per row: {sql}')
        cursor = self.cursor()
        try:
            cursor.executemany(sql, rows)
            return cursor.rowcount
        finally:
            cursor.close()

    def close(self) -> None:
        if self.dbapi_connection is None:
            return
        self.dbapi_connection.close()
        self.dbapi_connection = None


def configure_connection(cn: ConnectionWrapper) -> None:
    """Take manual transaction control and apply session pragmas.
    """
    cn.strategy.enable_autocommit(cn.driver_connection)
    cn.strategy.apply_pragmas(cn, cn.options)


def connect(url: sa.URL, options: ExportOptions) -> ConnectionWrapper:
    """Open a configured connection to the destination.
    """
    strategy = get_strategy(options.drivername)
    engine = get_engine_for_url(url)
    dbapi_connection = engine.raw_connection()
    cn = ConnectionWrapper(dbapi_connection, strategy, options)
    try:
        configure_connection(cn)
    except Exception:
        cn.close()
        raise
    logger.debug(f'Connected to {url.get_backend_name()} destination')
    return cn
