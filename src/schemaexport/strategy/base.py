"""
Base strategy interface for destination-specific export operations.

Each concrete strategy knows how one relational destination spells
connection URLs, transactions, pragmas, identifiers and column types. The
exporter works against this interface only.
"""
from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from schemaexport.sql import Column, build_create_table_sql, build_insert_sql
from schemaexport.types import BindType, ScalarKind, map_column_type
from schemaexport.types import map_param_type

if TYPE_CHECKING:
    from schemaexport.connection import ConnectionWrapper
    from schemaexport.options import ExportOptions

# Registry of dialect name -> strategy class
# Defined here to avoid circular imports (concrete strategies import from base)
_STRATEGY_REGISTRY: dict[str, type['DatabaseStrategy']] = {}


def register_strategy(dialect: str):
    """Decorator to register a strategy class for a dialect.

    Usage:
        @register_strategy('sqlite')
        class SQLiteStrategy(DatabaseStrategy):
            ...
    """
    def decorator(cls: type['DatabaseStrategy']) -> type['DatabaseStrategy']:
        _STRATEGY_REGISTRY[dialect] = cls
        return cls
    return decorator


class DatabaseStrategy(ABC):
    """Base class for destination-specific operations.
    """

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Dialect identifier, also the SQLAlchemy backend name."""

    @abstractmethod
    def build_connection_url(self, target: 'str | sa.URL') -> sa.URL:
        """Parse and validate a connection descriptor.

        Raises
            ConfigurationError: target is not a URL for this dialect
        """

    @abstractmethod
    def build_file_url(self, path: str, create_if_missing: bool = True) -> sa.URL:
        """Connection URL for a database file."""

    @abstractmethod
    def get_type_map(self) -> dict[ScalarKind, str]:
        """Return mapping of scalar kinds to column type tags."""

    @abstractmethod
    def enable_autocommit(self, raw_conn: Any) -> None:
        """Put the driver connection under explicit transaction control."""

    @abstractmethod
    def apply_pragmas(self, cn: 'ConnectionWrapper', options: 'ExportOptions') -> None:
        """Apply session-level settings right after connecting."""

    def begin(self, cn: 'ConnectionWrapper') -> None:
        self._execute_raw(cn, 'BEGIN')

    def commit(self, cn: 'ConnectionWrapper') -> None:
        cn.driver_connection.commit()

    def rollback(self, cn: 'ConnectionWrapper') -> None:
        cn.driver_connection.rollback()

    @contextmanager
    def _cursor(self, cn: 'ConnectionWrapper', sql: str, params: Sequence | None = None):
        """Context manager for cursor lifecycle.
        """
        cursor = cn.driver_connection.cursor()
        try:
            cursor.execute(sql, params or ())
            yield cursor
        finally:
            cursor.close()

    def _execute_raw(self, cn: 'ConnectionWrapper', sql: str,
                     params: Sequence | None = None) -> int:
        """Execute SQL and return rowcount."""
        with self._cursor(cn, sql, params) as cursor:
            return cursor.rowcount

    def _select_raw(self, cn: 'ConnectionWrapper', sql: str,
                    params: Sequence | None = None) -> list:
        """Execute SQL and return all rows as tuples."""
        with self._cursor(cn, sql, params) as cursor:
            return cursor.fetchall()

    def get_column_type(self, effective_type: Any) -> str:
        """Column type tag for an effective property type."""
        return map_column_type(effective_type, self.get_type_map())

    def get_bind_type(self, effective_type: Any) -> BindType:
        """Bind type for an effective property type."""
        return map_param_type(effective_type)

    def build_create_table_sql(self, table: str, columns: Sequence[Column],
                               quote: bool = True) -> str:
        return build_create_table_sql(table, columns, quote=quote, dialect=self.dialect_name)

    def build_insert_sql(self, table: str, columns: Sequence[str], quote: bool = True) -> str:
        return build_insert_sql(table, columns, quote=quote, dialect=self.dialect_name)
