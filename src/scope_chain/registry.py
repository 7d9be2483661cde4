"""Per-entity tables of named query operations.

Operations are registered explicitly during entity setup.  A table is an
immutable snapshot: registering returns a new table, and the entity swaps its
reference.  Lookups go through the table, never through attribute reflection.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from loguru import logger

from scope_chain.errors import UndeclaredOperation

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from scope_chain.scope import Scope


def _accepts_argument(fn: Callable[..., Any]) -> bool:
    """Whether *fn* can be called as ``fn(entity, term)``."""
    try:
        inspect.signature(fn).bind(None, "")
    except TypeError:
        return False
    except ValueError:
        # Builtins without an introspectable signature.
        return True
    return True


@dataclass(frozen=True)
class Operation:
    """A named scope-building operation: ``fn(entity, *args) -> Scope``."""

    name: str
    fn: Callable[..., Scope]
    accepts_argument: bool

    @classmethod
    def from_callable(cls, name: str, fn: Callable[..., Scope]) -> Operation:
        return cls(name=name, fn=fn, accepts_argument=_accepts_argument(fn))

    def __call__(self, entity: type, *args: Any) -> Scope:
        return self.fn(entity, *args)


class OperationTable:
    """Immutable mapping of operation name to :class:`Operation`."""

    __slots__ = ("_entity_name", "_operations")

    def __init__(self, entity_name: str = "", operations: dict[str, Operation] | None = None) -> None:
        self._entity_name = entity_name
        self._operations = MappingProxyType(dict(operations or {}))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._operations

    def __getitem__(self, name: str) -> Operation:
        try:
            return self._operations[name]
        except KeyError:
            raise UndeclaredOperation(self._entity_name, name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __repr__(self) -> str:
        return f"OperationTable({self._entity_name!r}, {sorted(self._operations)})"

    def get(self, name: str) -> Operation | None:
        return self._operations.get(name)

    def names(self) -> list[str]:
        return list(self._operations)

    def for_entity(self, entity_name: str) -> OperationTable:
        """Same operations, owned by another entity (used for subclass inheritance)."""
        return OperationTable(entity_name, dict(self._operations))

    def with_operation(self, name: str, fn: Callable[..., Scope]) -> OperationTable:
        """Return a new table with *fn* registered under *name* (last registration wins)."""
        if name in self._operations:
            logger.debug("{}: operation {!r} redefined", self._entity_name, name)
        operations = dict(self._operations)
        operations[name] = Operation.from_callable(name, fn)
        return OperationTable(self._entity_name, operations)
