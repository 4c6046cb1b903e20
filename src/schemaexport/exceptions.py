"""
Export-specific exception classes.
"""
import sqlite3

import sqlalchemy as sa


class ExportError(Exception):
    """Base class for all export module errors.
    """


class ConfigurationError(ExportError, ValueError):
    """Invalid exporter configuration or connection target.

    Always raised before any destination I/O takes place.
    """


class ExportNotSupportedError(ExportError, NotImplementedError):
    """The exporter cannot write to the requested kind of output.
    """


DbConnectionError = (
    sa.exc.OperationalError,
    sa.exc.InterfaceError,
    sqlite3.OperationalError,
    sqlite3.InterfaceError,
    )

IntegrityError = (
    sa.exc.IntegrityError,
    sqlite3.IntegrityError,
    )

ProgrammingError = (
    sa.exc.ProgrammingError,
    sqlite3.ProgrammingError,
    sqlite3.DatabaseError,
    )
