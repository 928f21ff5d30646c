from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterable, List, TypeVar

from resample_engine.core.errors import ConfigurationError

V = TypeVar("V")


@dataclass
class Registry(Generic[V]):
    """Name -> implementation table.

    Typical usage:
        DESIGNS = Registry[PartitionFn](_kind="resampling method")

        @DESIGNS.register("CV")
        def cv(n, desc, rng):
            ...

        fn = DESIGNS.get("CV")

    Registering an existing name replaces the previous entry. Unknown names
    raise :class:`ConfigurationError` listing what is available.
    """

    _items: Dict[str, V] = field(default_factory=dict)
    _kind: str = "entry"

    def register(self, name: str) -> Callable[[V], V]:
        def deco(value: V) -> V:
            return self.add(name, value)

        return deco

    def add(self, name: str, value: V) -> V:
        self._items[name] = value
        return value

    def get(self, name: str) -> V:
        if name not in self._items:
            raise ConfigurationError(f"Unknown {self._kind} {name!r}. Available: {self.names()}")
        return self._items[name]

    def names(self) -> List[str]:
        return sorted(self._items)

    def items(self) -> Iterable[tuple[str, V]]:
        return self._items.items()
