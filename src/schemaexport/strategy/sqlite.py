"""
SQLite-specific strategy implementation.

This module implements the DatabaseStrategy interface for SQLite:
- SQLAlchemy `sqlite://` URLs, and SQLite URI filenames for file targets
- explicit BEGIN/COMMIT with the driver's implicit transactions disabled
- write-ahead journaling via PRAGMA journal_mode
- INTEGER/REAL/TEXT/BLOB column types
"""
import logging
import pathlib
from typing import TYPE_CHECKING, Any

import sqlalchemy as sa
from schemaexport.exceptions import ConfigurationError
from schemaexport.strategy.base import DatabaseStrategy, register_strategy
from schemaexport.types import ScalarKind, sqlite_column_types

if TYPE_CHECKING:
    from schemaexport.connection import ConnectionWrapper
    from schemaexport.options import ExportOptions

logger = logging.getLogger(__name__)


@register_strategy('sqlite')
class SQLiteStrategy(DatabaseStrategy):
    """SQLite-specific operations.
    """

    @property
    def dialect_name(self) -> str:
        """Return the dialect identifier for SQLite."""
        return 'sqlite'

    def build_connection_url(self, target: 'str | sa.URL') -> sa.URL:
        """Parse a SQLAlchemy URL such as `sqlite:///data.db`.
        """
        url = target if isinstance(target, sa.URL) else sa.make_url(target)
        if url.get_backend_name() != self.dialect_name:
            raise ConfigurationError(
                f'Expected a {self.dialect_name} connection string, got {url.get_backend_name()!r}')
        return url

    def build_file_url(self, path: str, create_if_missing: bool = True) -> sa.URL:
        """Build a URI-filename URL so the open mode can be controlled.

        `mode=rwc` creates a missing file, `mode=rw` requires it to exist.
        """
        mode = 'rwc' if create_if_missing else 'rw'
        filename = pathlib.Path(path).expanduser().resolve().as_uri()
        return sa.URL.create('sqlite', database=filename, query={'mode': mode, 'uri': 'true'})

    def get_type_map(self) -> dict[ScalarKind, str]:
        """Return mapping of scalar kinds to SQLite column types."""
        return sqlite_column_types

    def enable_autocommit(self, raw_conn: Any) -> None:
        """Disable pysqlite's implicit transactions; BEGIN is issued explicitly.
        """
        raw_conn.isolation_level = None

    def apply_pragmas(self, cn: 'ConnectionWrapper', options: 'ExportOptions') -> None:
        """Switch to write-ahead journaling when enabled.
        """
        if not options.use_wal_mode:
            return
        rows = self._select_raw(cn, 'PRAGMA journal_mode = WAL')
        mode = rows[0][0] if rows else None
        logger.debug(f'SQLite journal mode is {mode}')
