"""
Generated entity instances grouped by entity type.
"""
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

__all__ = ['GeneratedData', 'get_instances']


class GeneratedData(Mapping):
    """Ordered, read-only mapping of entity type -> instances.

    Examples
        data = GeneratedData({Company: companies, Order: orders})
        data = GeneratedData([(Company, companies), (Order, orders)])
        data.get(Company)  # tuple of Company instances
    """

    def __init__(self, data: Mapping[type, Sequence[Any]] | Iterable[tuple[type, Sequence[Any]]] = ()) -> None:
        items = data.items() if isinstance(data, Mapping) else data
        self._data: dict[type, tuple[Any, ...]] = {}
        for entity_type, instances in items:
            self._data[entity_type] = tuple(instances)

    def get(self, entity_type: type, default: Any = ()) -> tuple[Any, ...]:
        """Instances of an entity type; empty when none were generated."""
        return self._data.get(entity_type, default)

    def __getitem__(self, entity_type: type) -> tuple[Any, ...]:
        return self._data[entity_type]

    def __iter__(self) -> Iterator[type]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        counts = ', '.join(f'{t.__name__}={len(v)}' for t, v in self._data.items())
        return f'GeneratedData({counts})'


def get_instances(data: Any, entity_type: type) -> Sequence[Any]:
    """Fetch instances from any object exposing `get(entity_type)`.

    A missing entry reads as an empty sequence.
    """
    instances = data.get(entity_type)
    if instances is None:
        return ()
    return instances
