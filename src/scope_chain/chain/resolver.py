"""Normalization of ``or_chain`` arguments into concrete sub-scopes.

Loose arguments (a scope, an operation name, ``(name, *args)``,
``{name: args}``) are first classified into explicit reference types, then
resolved against the entity's operation table.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from scope_chain.errors import InvalidCombinatorArgument
from scope_chain.scope import Scope

if TYPE_CHECKING:
    from scope_chain.registry import OperationTable
    from scope_chain.searchable import Searchable

# ---------------------------------------------------------------------------
# Argument references
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class ScopeRef:
    """An already-built scope, passed through unchanged."""

    scope: Scope


@dataclass(frozen=True)
class OperationRef:
    """A declared operation, called with the ambient search term if it takes one."""

    name: str


@dataclass(frozen=True)
class OperationCallRef:
    """A declared operation called with explicit arguments."""

    name: str
    args: tuple[Any, ...] = ()


ChainArg = ScopeRef | OperationRef | OperationCallRef


def _call_args(value: Any) -> tuple[Any, ...]:
    # A tuple is an argument list; anything else is a single argument.
    return value if isinstance(value, tuple) else (value,)


def to_ref(arg: Any, operations: OperationTable, entity_name: str = "") -> ChainArg:
    """Classify a loose ``or_chain`` argument.

    Raises :class:`InvalidCombinatorArgument` for anything that is not a scope
    or a reference to a declared operation.
    """
    if isinstance(arg, Scope):
        return ScopeRef(arg)
    if isinstance(arg, ScopeRef):
        return arg
    if isinstance(arg, OperationRef | OperationCallRef):
        if arg.name not in operations:
            raise InvalidCombinatorArgument(entity_name, arg, f"no operation named {arg.name!r}")
        return arg
    if isinstance(arg, str):
        if arg in operations:
            return OperationRef(arg)
        raise InvalidCombinatorArgument(entity_name, arg, f"no operation named {arg!r}")
    if isinstance(arg, tuple | list) and arg and arg[0] in operations:
        return OperationCallRef(arg[0], tuple(arg[1:]))
    if isinstance(arg, Mapping) and len(arg) == 1:
        ((name, value),) = arg.items()
        if name in operations:
            return OperationCallRef(name, _call_args(value))
    raise InvalidCombinatorArgument(entity_name, arg)


def resolve(arg: Any, entity: type[Searchable], search_term: str = "") -> Scope:
    """Resolve one ``or_chain`` argument into a scope of *entity*."""
    operations = entity.operations()
    ref = to_ref(arg, operations, entity.__name__)
    if isinstance(ref, ScopeRef):
        return ref.scope
    operation = operations[ref.name]
    if isinstance(ref, OperationCallRef):
        result = operation(entity, *ref.args)
    elif search_term and operation.accepts_argument:
        result = operation(entity, search_term)
    else:
        result = operation(entity)
    if not isinstance(result, Scope):
        raise InvalidCombinatorArgument(entity.__name__, arg, f"operation returned {type(result).__name__}, not Scope")
    return result
