"""
Schema-driven export of generated entities into a relational destination.

For every entity type, in the schema's generation order:

    instances → exportable properties → columns → CREATE TABLE IF NOT EXISTS
                                                → INSERT, bound once per row

All entity types are written inside one transaction, committed once at the
end. Any failure rolls the whole export back.
"""
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, BinaryIO

import sqlalchemy as sa
from schemaexport.connection import connect, create_file_url, create_url
from schemaexport.connection import dispose_engine
from schemaexport.data import get_instances
from schemaexport.exceptions import ExportNotSupportedError
from schemaexport.options import ExportOptions, load_export_options
from schemaexport.properties import ExportableProperty
from schemaexport.properties import resolve_exportable_properties
from schemaexport.schema import Schema
from schemaexport.sql import Column
from schemaexport.strategy import get_strategy
from schemaexport.transaction import Transaction

logger = logging.getLogger(__name__)

__all__ = ['SchemaDataExporter', 'SqliteExporter']


class SchemaDataExporter(ABC):
    """Exports generated data described by a schema."""

    @abstractmethod
    def export(self, schema: Schema, data: Any, output: BinaryIO) -> None:
        """Write the generated data to a binary stream."""


class SqliteExporter(SchemaDataExporter):
    """Exports generated data to SQLite using parameterized INSERTs in one transaction.

    Examples
        exporter = SqliteExporter(create_tables=True, quote_identifiers=True)
        exporter.export_to_database(schema, data, 'sqlite:///mock.db')
        exporter.export_to_file(schema, data, 'mock.db')
    """

    def __init__(self, options: ExportOptions | dict[str, Any] | None = None, **kw: Any) -> None:
        self.options = load_export_options(options, **kw)
        self.strategy = get_strategy(self.options.drivername)

    def export(self, schema: Schema, data: Any, output: BinaryIO) -> None:
        raise ExportNotSupportedError(
            'SQLite exporter writes to a database. '
            'Use export_to_database(schema, data, connection_string) instead.')

    def export_to_database(self, schema: Schema, data: Any,
                           connection_string: 'str | sa.URL') -> dict[str, int]:
        """Export generated data into the database named by a connection string.

        Args:
            schema: Entity definitions and generation order
            data: Generated instances, anything with `get(entity_type)`
            connection_string: SQLAlchemy URL, e.g. `sqlite:///mock.db`

        Returns
            Mapping of table name -> rows inserted, in write order

        Raises
            ConfigurationError: connection string is missing or invalid
        """
        url = create_url(connection_string, self.options)
        written: dict[str, int] = {}

        with connect(url, self.options) as cn, Transaction(cn) as tx:
            for entity_type in schema.generation_order:
                instances = get_instances(data, entity_type)
                if not instances:
                    logger.debug(f'No instances of {entity_type.__name__}, skipping')
                    continue

                definition = schema.entity(entity_type)
                properties = resolve_exportable_properties(entity_type, definition)
                if not properties:
                    logger.debug(f'No exportable properties on {entity_type.__name__}, skipping')
                    continue

                table = self.options.get_table_name(entity_type, definition)

                if self.options.create_tables:
                    self.ensure_table(tx, table, self.get_columns(properties))

                inserted = self.insert_all(tx, table, properties, instances)
                written[table] = written.get(table, 0) + inserted
                logger.info(f'Exported {inserted} rows of {entity_type.__name__} into {table}')

        return written

    def export_to_file(self, schema: Schema, data: Any, path: str,
                       create_if_missing: bool = True) -> dict[str, int]:
        """Export generated data into a SQLite database file.

        The engine opened for the file is disposed afterwards.

        Args:
            path: Path to the database file
            create_if_missing: Create the file when it does not exist;
                otherwise a missing file is a connection error
        """
        url = create_file_url(path, self.options, create_if_missing=create_if_missing)
        try:
            return self.export_to_database(schema, data, url)
        finally:
            dispose_engine(url)

    def get_columns(self, properties: Sequence[ExportableProperty]) -> list[Column]:
        """Destination columns, one per exportable property, in the same order."""
        return [Column(p.column_name, self.strategy.get_column_type(p.effective_type))
                for p in properties]

    def ensure_table(self, tx: Transaction, table: str, columns: Sequence[Column]) -> None:
        """Create the table unless one with that name already exists.

        An existing table is left alone whatever its shape.
        """
        sql = self.strategy.build_create_table_sql(table, columns, quote=self.options.quote_identifiers)
        tx.execute(sql)

    def insert_all(self, tx: Transaction, table: str,
                   properties: Sequence[ExportableProperty], instances: Sequence[Any]) -> int:
        """Insert one row per instance with a single prepared statement.

        Returns the number of rows inserted.
        """
        sql = self.strategy.build_insert_sql(
            table, [p.column_name for p in properties], quote=self.options.quote_identifiers)
        binders = [(p, self.strategy.get_bind_type(p.effective_type)) for p in properties]

        rows = ([bind_type.bind(p.get_value(instance)) for p, bind_type in binders]
                for instance in instances)
        return tx.executemany(sql, rows)
