"""
SQL statement generation for table creation and row insertion.

Identifiers are either all quoted or all written raw; the choice is made once
per export and applied to every table and column name. Raw names are the
caller's responsibility (reserved words, spaces, embedded quotes).
"""
import logging
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

__all__ = [
    'Column',
    'quote_identifier',
    'format_identifier',
    'make_placeholders',
    'build_create_table_sql',
    'build_insert_sql',
]

_PLACEHOLDERS = {
    'sqlite': '?',
    }


@dataclass(frozen=True, slots=True)
class Column:
    """Destination column: raw name and column type tag."""
    name: str
    type: str


def quote_identifier(identifier: str, dialect: str = 'sqlite') -> str:
    """Safely quote database identifiers.

    Parameters
        identifier: Table or column name
        dialect: Database dialect

    Returns
        Quoted identifier

    Raises
        ValueError: If dialect is unsupported
    """
    if dialect == 'sqlite':
        return '"' + identifier.replace('"', '""') + '"'

    raise ValueError(f'Unknown dialect: {dialect}')


def format_identifier(identifier: str, quote: bool = True, dialect: str = 'sqlite') -> str:
    """Quote an identifier, or return it unchanged when quoting is off."""
    if not quote:
        return identifier
    return quote_identifier(identifier, dialect)


def make_placeholders(count: int, dialect: str = 'sqlite') -> str:
    """Comma-separated positional placeholders for `count` parameters."""
    if dialect not in _PLACEHOLDERS:
        raise ValueError(f'Unknown dialect: {dialect}')
    return ', '.join([_PLACEHOLDERS[dialect]] * count)


def build_create_table_sql(table: str, columns: Sequence[Column], quote: bool = True,
                           dialect: str = 'sqlite') -> str:
    """Generate a CREATE TABLE IF NOT EXISTS statement.

    Args:
        table: Table name
        columns: Columns in destination order
        quote: Quote table and column names
        dialect: Database dialect

    Returns
        SQL statement string
    """
    table_sql = format_identifier(table, quote, dialect)
    column_sql = ', '.join(
        f'{format_identifier(col.name, quote, dialect)} {col.type}' for col in columns
    )
    return f'CREATE TABLE IF NOT EXISTS {table_sql} ({column_sql})'


def build_insert_sql(table: str, columns: Sequence[str], quote: bool = True,
                     dialect: str = 'sqlite') -> str:
    """Generate a parameterized INSERT statement.

    Args:
        table: Table name
        columns: Column names in binding order
        quote: Quote table and column names
        dialect: Database dialect

    Returns
        SQL statement string with positional placeholders
    """
    table_sql = format_identifier(table, quote, dialect)
    column_sql = ', '.join(format_identifier(col, quote, dialect) for col in columns)
    placeholders = make_placeholders(len(columns), dialect)
    return f'INSERT INTO {table_sql} ({column_sql}) VALUES ({placeholders})'
