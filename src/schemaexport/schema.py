"""
Schema metadata consumed by the exporter.

These are plain, immutable containers. Whatever builds the schema (a fluent
builder, a config loader, hand-written code) fills them in; the exporter only
reads them.

Examples
    schema = Schema([
        EntityDefinition(Company),
        EntityDefinition(Order, table_name='orders', properties=(
            PropertyDefinition('status', conversion=lambda s: s.name, returns=str),
        )),
    ])
"""
import inspect
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from schemaexport.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = ['PropertyDefinition', 'EntityDefinition', 'Schema']


@dataclass(frozen=True)
class PropertyDefinition:
    """Per-property overrides declared by the schema.

    name: attribute name on the entity type
    column_name: destination column name, defaults to `name`
    conversion: callable applied to non-null values before export
    returns: declared output type of `conversion`
    """
    name: str
    column_name: str | None = None
    conversion: Callable[[Any], Any] | None = None
    returns: Any = None

    @property
    def has_conversion(self) -> bool:
        return self.conversion is not None

    @property
    def output_type(self) -> Any:
        """Declared output type of the conversion.

        Taken from `returns`, then from the conversion itself when it is a
        class, then from its return annotation. Unknown types are `Any`.
        """
        if self.conversion is None:
            return None
        if self.returns is not None:
            return self.returns
        if isinstance(self.conversion, type):
            return self.conversion
        try:
            annotation = inspect.get_annotations(self.conversion).get('return', Any)
            if isinstance(annotation, str):
                annotation = eval(annotation, getattr(self.conversion, '__globals__', {}))
        except (TypeError, NameError, AttributeError, SyntaxError) as e:
            logger.debug(f'Could not read return annotation of conversion for {self.name}: {e}')
            return Any
        return annotation


@dataclass(frozen=True)
class EntityDefinition:
    """Schema entry for one entity type."""
    entity_type: type
    table_name: str | None = None
    properties: tuple[PropertyDefinition, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'properties', tuple(self.properties))
        names = [p.name for p in self.properties]
        if len(names) != len(set(names)):
            raise ConfigurationError(f'Duplicate property definitions on {self.entity_type.__name__}')

    def property(self, name: str) -> PropertyDefinition | None:
        for definition in self.properties:
            if definition.name == name:
                return definition
        return None


class Schema:
    """Ordered entity definitions plus the order in which to process them.

    `generation_order` defaults to the declaration order of `entities`. It is
    expected to list referenced entity types before their dependents.
    """

    def __init__(self, entities: Iterable[EntityDefinition] = (),
                 generation_order: Iterable[type] | None = None) -> None:
        self._entities = tuple(entities)
        types = [e.entity_type for e in self._entities]
        if len(types) != len(set(types)):
            raise ConfigurationError('Each entity type may only be defined once')
        if generation_order is None:
            self._generation_order = tuple(types)
        else:
            self._generation_order = tuple(generation_order)

    @property
    def entities(self) -> tuple[EntityDefinition, ...]:
        return self._entities

    @property
    def generation_order(self) -> tuple[type, ...]:
        return self._generation_order

    def entity(self, entity_type: type) -> EntityDefinition | None:
        """Definition for an entity type, or None when the schema has none."""
        for definition in self._entities:
            if definition.entity_type is entity_type:
                return definition
        return None

    def __repr__(self) -> str:
        names = ', '.join(t.__name__ for t in self._generation_order)
        return f'Schema([{names}])'
