import dataclasses
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from schemaexport.exceptions import ConfigurationError
from schemaexport.schema import EntityDefinition
from schemaexport.strategy import get_available_dialects, is_supported_dialect

from libb import ConfigOptions, load_options

__all__ = ['ExportOptions', 'load_export_options']


@dataclass
class ExportOptions(ConfigOptions):
    """Options

    supported driver names: `sqlite`

    - create_tables: emit CREATE TABLE IF NOT EXISTS before inserting (default: True)
    - use_wal_mode: set PRAGMA journal_mode = WAL on open (default: True)
    - quote_identifiers: quote every table and column name (default: True)
    - table_name_resolver: entity type -> table name; wins over the schema's
      table name, which wins over the type name (default: None)
    """
    drivername: str = 'sqlite'
    create_tables: bool = True
    use_wal_mode: bool = True
    quote_identifiers: bool = True
    table_name_resolver: Callable[[type], str] | None = None

    def __post_init__(self):
        if not is_supported_dialect(self.drivername):
            available = get_available_dialects()
            raise ConfigurationError(f'drivername must be one of: {available}')
        if self.table_name_resolver is not None and not callable(self.table_name_resolver):
            raise ConfigurationError('table_name_resolver must be callable')

    def get_table_name(self, entity_type: type,
                       definition: EntityDefinition | None = None) -> str:
        """Unquoted table name for an entity type."""
        if self.table_name_resolver is not None:
            name = self.table_name_resolver(entity_type)
            if not isinstance(name, str) or not name.strip():
                raise ConfigurationError(
                    f'table_name_resolver returned {name!r} for {entity_type.__name__}')
            return name
        if definition is not None and definition.table_name:
            return definition.table_name
        return entity_type.__name__


def load_export_options(options: ExportOptions | dict[str, Any] | str | None = None,
                        config: Any | None = None, **kw: Any) -> ExportOptions:
    """Build ExportOptions from an instance, a dict, a config path or keywords.

    Keyword arguments override values taken from `options`.
    """
    if isinstance(options, ExportOptions):
        return dataclasses.replace(options, **kw) if kw else options
    if options is None:
        return ExportOptions(**kw)
    options_func = load_options(cls=ExportOptions)(lambda o, c: o)
    return options_func(options, config, **kw)
