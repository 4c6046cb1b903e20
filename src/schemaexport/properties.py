"""
Exportable property resolution.

Works out which attributes of an entity type become destination columns.
Type introspection (`describe_type`) is cached per type; resolution against a
schema entity definition (`resolve_exportable_properties`) is not, because
conversions and column overrides belong to the schema, not the type.

An attribute is a candidate when it is public and both readable and writable:
- dataclass fields, in field order
- otherwise annotated class attributes, base classes first
- then properties that define a setter, typed by the getter's return annotation
"""
import dataclasses
import inspect
import logging
import sys
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from schemaexport.cache import get_descriptor_cache
from schemaexport.schema import EntityDefinition
from schemaexport.types import is_scalar_type

logger = logging.getLogger(__name__)

__all__ = [
    'PropertyDescriptor',
    'ExportableProperty',
    'describe_type',
    'resolve_exportable_properties',
]


@dataclass(frozen=True, slots=True)
class PropertyDescriptor:
    """Public read/write attribute of a type with its annotated type."""
    name: str
    type: Any


@dataclass(frozen=True, slots=True)
class ExportableProperty:
    """Attribute selected for export, with its effective (post-conversion) type.
    """
    name: str
    column_name: str
    property_type: Any
    effective_type: Any
    conversion: Callable[[Any], Any] | None = None

    def get_value(self, instance: Any) -> Any:
        """Read the value to export; None is never passed to the conversion.
        """
        value = getattr(instance, self.name, None)
        if value is None or self.conversion is None:
            return value
        return self.conversion(value)


def _is_classvar(hint: Any) -> bool:
    return hint is typing.ClassVar or typing.get_origin(hint) is typing.ClassVar


def _resolve_annotations(obj: Any, globalns: dict[str, Any],
                         localns: dict[str, Any] | None = None) -> dict[str, Any]:
    """Evaluate annotations one name at a time.

    A name whose annotation cannot be evaluated (e.g. imported only under
    TYPE_CHECKING) resolves to Any; the others are unaffected.
    """
    hints: dict[str, Any] = {}
    for name, annotation in inspect.get_annotations(obj).items():
        if isinstance(annotation, str):
            try:
                annotation = eval(annotation, globalns, localns)
            except (NameError, AttributeError, SyntaxError, TypeError) as e:
                logger.debug(f'Unresolved annotation {name}: {annotation!r} on {obj!r}: {e}')
                annotation = Any
        hints[name] = annotation
    return hints


def _class_hints(entity_type: type) -> dict[str, Any]:
    """Annotations of a class and its bases, subclasses overriding."""
    hints: dict[str, Any] = {}
    for klass in reversed(entity_type.__mro__):
        if klass is object:
            continue
        module = sys.modules.get(klass.__module__)
        globalns = vars(module) if module is not None else {}
        hints.update(_resolve_annotations(klass, globalns, dict(vars(klass))))
    return hints


def _return_hint(func: Any) -> Any:
    return _resolve_annotations(func, getattr(func, '__globals__', {})).get('return', Any)


def _annotated_names(entity_type: type) -> list[str]:
    if dataclasses.is_dataclass(entity_type):
        return [f.name for f in dataclasses.fields(entity_type)]
    names: list[str] = []
    for klass in reversed(entity_type.__mro__):
        if klass is object:
            continue
        for name in inspect.get_annotations(klass):
            if name not in names:
                names.append(name)
    return names


def _settable_properties(entity_type: type) -> dict[str, Any]:
    found: dict[str, Any] = {}
    for klass in reversed(entity_type.__mro__):
        for name, attr in vars(klass).items():
            if not isinstance(attr, property):
                continue
            if attr.fget is None or attr.fset is None:
                found.pop(name, None)
                continue
            found[name] = _return_hint(attr.fget)
    return found


def _build_descriptors(entity_type: type) -> tuple[PropertyDescriptor, ...]:
    hints = _class_hints(entity_type)
    descriptors: dict[str, PropertyDescriptor] = {}

    for name in _annotated_names(entity_type):
        hint = hints.get(name, Any)
        if name.startswith('_') or _is_classvar(hint):
            continue
        descriptors[name] = PropertyDescriptor(name, hint)

    for name, hint in _settable_properties(entity_type).items():
        if name.startswith('_'):
            continue
        descriptors[name] = PropertyDescriptor(name, hint)

    return tuple(descriptors.values())


def describe_type(entity_type: type) -> tuple[PropertyDescriptor, ...]:
    """Public read/write attributes of a type in declaration order.

    Built once per type and cached by type identity.
    """
    cache = get_descriptor_cache()
    if entity_type in cache:
        return cache[entity_type]

    logger.debug(f'Describing type {entity_type.__name__}')
    descriptors = _build_descriptors(entity_type)
    cache[entity_type] = descriptors
    return descriptors


def resolve_exportable_properties(entity_type: type,
                                  definition: EntityDefinition | None = None) -> list[ExportableProperty]:
    """Ordered exportable properties of an entity type.

    A property with a conversion is always exported, typed by the
    conversion's declared output. Without one, only scalar-typed properties
    are exported; the rest are skipped. An empty list means the entity type
    has nothing to export.
    """
    exportable: list[ExportableProperty] = []

    for descriptor in describe_type(entity_type):
        override = definition.property(descriptor.name) if definition else None
        column_name = (override.column_name if override else None) or descriptor.name

        if override is not None and override.has_conversion:
            effective_type = override.output_type
            if not is_scalar_type(effective_type):
                logger.debug(f'Conversion output of {entity_type.__name__}.{descriptor.name} '
                             f'is {effective_type!r}, writing as TEXT')
            exportable.append(ExportableProperty(
                name=descriptor.name,
                column_name=column_name,
                property_type=descriptor.type,
                effective_type=effective_type,
                conversion=override.conversion,
            ))
        elif is_scalar_type(descriptor.type):
            exportable.append(ExportableProperty(
                name=descriptor.name,
                column_name=column_name,
                property_type=descriptor.type,
                effective_type=descriptor.type,
            ))
        else:
            logger.debug(f'Skipping {entity_type.__name__}.{descriptor.name}: '
                         f'{descriptor.type!r} is not a scalar type')

    if definition is not None:
        known = {d.name for d in describe_type(entity_type)}
        for override in definition.properties:
            if override.name not in known:
                logger.debug(f'Ignoring definition for unknown property '
                             f'{entity_type.__name__}.{override.name}')

    return exportable
