"""
Type handling for export operations.

This module provides:
- ScalarKind: the value kinds that map directly onto a destination column
- resolve_kind: Python type -> ScalarKind
- map_column_type / map_param_type: effective type -> column tag / bind type
- TypeConverter: normalize NumPy and pandas scalars before binding
"""
import datetime
import decimal
import enum
import logging
import math
import types
import typing
import uuid
from typing import Any

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

NoneType = type(None)


class ScalarKind(enum.Enum):
    """Kinds of values that can be written to a column without conversion."""
    BOOLEAN = enum.auto()
    INTEGER = enum.auto()
    ENUM = enum.auto()
    FLOAT = enum.auto()
    DECIMAL = enum.auto()
    TEXT = enum.auto()
    DATETIME = enum.auto()
    DATE = enum.auto()
    TIME = enum.auto()
    DURATION = enum.auto()
    UUID = enum.auto()
    BYTES = enum.auto()


sqlite_column_types = {
    ScalarKind.BOOLEAN: 'INTEGER',
    ScalarKind.INTEGER: 'INTEGER',
    ScalarKind.ENUM: 'INTEGER',
    ScalarKind.FLOAT: 'REAL',
    ScalarKind.DECIMAL: 'REAL',
    ScalarKind.BYTES: 'BLOB',
    ScalarKind.TEXT: 'TEXT',
    ScalarKind.DATETIME: 'TEXT',
    ScalarKind.DATE: 'TEXT',
    ScalarKind.TIME: 'TEXT',
    ScalarKind.DURATION: 'TEXT',
    ScalarKind.UUID: 'TEXT',
    }

# Checked in order: bool before int, datetime before date.
_KIND_BY_TYPE: tuple[tuple[tuple[type, ...], ScalarKind], ...] = (
    ((bool, np.bool_), ScalarKind.BOOLEAN),
    ((int, np.integer), ScalarKind.INTEGER),
    ((float, np.floating), ScalarKind.FLOAT),
    ((decimal.Decimal,), ScalarKind.DECIMAL),
    ((str,), ScalarKind.TEXT),
    ((datetime.datetime,), ScalarKind.DATETIME),
    ((datetime.date,), ScalarKind.DATE),
    ((datetime.time,), ScalarKind.TIME),
    ((datetime.timedelta,), ScalarKind.DURATION),
    ((uuid.UUID,), ScalarKind.UUID),
    ((bytes, bytearray, memoryview), ScalarKind.BYTES),
)


def unwrap_optional(tp: Any) -> Any:
    """Strip `Optional[X]`, `X | None` and `Annotated[X, ...]` down to `X`.

    Unions of more than one non-None member are returned unchanged.
    """
    origin = typing.get_origin(tp)
    if origin is typing.Annotated:
        return unwrap_optional(typing.get_args(tp)[0])
    if origin is typing.Union or origin is types.UnionType:
        members = [arg for arg in typing.get_args(tp) if arg is not NoneType]
        if len(members) == 1:
            return unwrap_optional(members[0])
    return tp


def is_integral_enum(tp: type[enum.Enum]) -> bool:
    """Enum whose members are all backed by integers."""
    if issubclass(tp, int):
        return True
    return all(isinstance(member.value, int) for member in tp)


def resolve_kind(tp: Any) -> ScalarKind | None:
    """Resolve a Python type to its scalar kind, or None when unsupported.

    Enums backed by integers resolve to ENUM; any other enum is written by
    value as TEXT.
    """
    tp = unwrap_optional(tp)
    if typing.get_origin(tp) is not None or not isinstance(tp, type):
        return None
    if issubclass(tp, enum.Enum):
        return ScalarKind.ENUM if is_integral_enum(tp) else ScalarKind.TEXT
    for candidates, kind in _KIND_BY_TYPE:
        if issubclass(tp, candidates):
            return kind
    return None


def is_scalar_type(tp: Any) -> bool:
    """Check whether a type can be exported without a conversion."""
    return resolve_kind(tp) is not None


def map_column_type(tp: Any, type_map: dict[ScalarKind, str] | None = None) -> str:
    """Map an effective type to a destination column type tag.

    Unsupported types fall back to TEXT.
    """
    type_map = type_map or sqlite_column_types
    return type_map.get(resolve_kind(tp), 'TEXT')


def map_param_type(tp: Any) -> 'BindType':
    """Map an effective type to the bind type used for its parameters.
    """
    return _BIND_TYPE_BY_TAG[sqlite_column_types.get(resolve_kind(tp), 'TEXT')]


class TypeConverter:
    """Normalize NumPy and pandas values to plain Python values.
    """

    @staticmethod
    def convert_value(value: Any) -> Any:
        """Convert a single value to a driver-compatible Python value."""
        if value is None:
            return None

        if isinstance(value, float) and math.isnan(value):
            return None

        if value is pd.NaT or value is pd.NA:
            return None

        if isinstance(value, np.datetime64):
            if np.isnat(value):
                return None
            return pd.Timestamp(value).to_pydatetime()

        if isinstance(value, np.generic):
            value = value.item()
            if isinstance(value, float) and math.isnan(value):
                return None
            return value

        if isinstance(value, pd.Timestamp):
            return value.to_pydatetime()

        return value


def _bind_integer(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, bool):
        return int(value)
    return value


def _bind_real(value: Any) -> Any:
    if isinstance(value, decimal.Decimal):
        return float(value)
    return value


def _bind_blob(value: Any) -> Any:
    if isinstance(value, bytearray | memoryview):
        return bytes(value)
    return value


def _bind_text(value: Any) -> str:
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(value, str):
        return str(value)
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=' ')
    if isinstance(value, datetime.date | datetime.time):
        return value.isoformat()
    return str(value)


class BindType(enum.Enum):
    """Destination parameter type for a bound value.
    """
    INTEGER = 'Integer'
    REAL = 'Real'
    TEXT = 'Text'
    BLOB = 'Blob'

    def bind(self, value: Any) -> Any:
        """Coerce a value for binding; None binds as NULL.
        """
        value = TypeConverter.convert_value(value)
        if value is None:
            return None
        return _BINDERS[self](value)


_BINDERS = {
    BindType.INTEGER: _bind_integer,
    BindType.REAL: _bind_real,
    BindType.TEXT: _bind_text,
    BindType.BLOB: _bind_blob,
    }

_BIND_TYPE_BY_TAG = {
    'INTEGER': BindType.INTEGER,
    'REAL': BindType.REAL,
    'TEXT': BindType.TEXT,
    'BLOB': BindType.BLOB,
    }
