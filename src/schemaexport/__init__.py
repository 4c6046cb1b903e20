"""
Schema-driven export of generated entity data into relational databases.

Exports can be run either as:
- Module functions: schemaexport.export_to_database(schema, data, url)
- SqliteExporter methods: SqliteExporter(**options).export_to_database(schema, data, url)

The module functions are thin facades over SqliteExporter.
"""
__version__ = '0.1.0'

from typing import Any

import sqlalchemy as sa
from schemaexport.data import GeneratedData
from schemaexport.exceptions import ConfigurationError, DbConnectionError
from schemaexport.exceptions import ExportError, ExportNotSupportedError
from schemaexport.exceptions import IntegrityError, ProgrammingError
from schemaexport.exporter import SchemaDataExporter, SqliteExporter
from schemaexport.options import ExportOptions
from schemaexport.properties import ExportableProperty
from schemaexport.properties import resolve_exportable_properties
from schemaexport.schema import EntityDefinition, PropertyDefinition, Schema
from schemaexport.types import BindType, map_column_type, map_param_type


def export_to_database(schema: Schema, data: Any, connection_string: 'str | sa.URL',
                       options: ExportOptions | dict[str, Any] | None = None,
                       **kw: Any) -> dict[str, int]:
    """Export generated data into the database named by a connection string.
    """
    return SqliteExporter(options, **kw).export_to_database(schema, data, connection_string)


def export_to_file(schema: Schema, data: Any, path: str, create_if_missing: bool = True,
                   options: ExportOptions | dict[str, Any] | None = None,
                   **kw: Any) -> dict[str, int]:
    """Export generated data into a SQLite database file.
    """
    exporter = SqliteExporter(options, **kw)
    return exporter.export_to_file(schema, data, path, create_if_missing=create_if_missing)


__all__ = [
    'export_to_database',
    'export_to_file',
    'SqliteExporter',
    'SchemaDataExporter',
    'ExportOptions',
    'Schema',
    'EntityDefinition',
    'PropertyDefinition',
    'GeneratedData',
    'ExportableProperty',
    'resolve_exportable_properties',
    'BindType',
    'map_column_type',
    'map_param_type',
    'ExportError',
    'ConfigurationError',
    'ExportNotSupportedError',
    'DbConnectionError',
    'IntegrityError',
    'ProgrammingError',
]
