"""OR-chain construction: fold sub-scopes into one joined scope.

Each argument is resolved into a sub-scope, the sub-scopes' association
requirements are unioned, and their leaf conditions are ORed together onto
the entity's base scope.  The requirements are applied exactly once.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger

from scope_chain.chain.joins import JoinAccumulator
from scope_chain.chain.resolver import resolve
from scope_chain.errors import EmptyScopeConstraint, InvalidCombinatorArgument
from scope_chain.scope import conjoin

if TYPE_CHECKING:
    from scope_chain.scope import Scope
    from scope_chain.searchable import Searchable


def split_search_option(entity: type[Searchable], terms: tuple[Any, ...]) -> tuple[tuple[Any, ...], str]:
    """Pop a trailing ``{"search": term}`` options mapping off *terms*.

    A single-entry mapping keyed by a declared operation is an argument, not
    options, even when that operation is named ``search``.
    """
    if not terms:
        return terms, ""
    last = terms[-1]
    if not isinstance(last, Mapping) or "search" not in last:
        return terms, ""
    if len(last) == 1 and "search" in entity.operations():
        return terms, ""
    search = last["search"]
    return terms[:-1], "" if search is None else str(search)


def leaf_constraint(entity: type[Searchable], scope: Scope, position: int) -> Any:
    """The single top-level condition of *scope*."""
    if not scope.conditions:
        raise EmptyScopeConstraint(entity.__name__, position)
    return conjoin(scope.conditions)


def or_chain(entity: type[Searchable], *terms: Any, search: str | None = None) -> Scope:
    """OR the leaf conditions of *terms* onto *entity*'s base scope.

    *terms* may be scopes, declared operation names, ``(name, *args)`` tuples
    or ``{name: args}`` mappings.  Name-only terms receive the ambient search
    term, taken from *search* or a trailing ``{"search": ...}`` mapping.
    """
    terms, ambient = split_search_option(entity, terms)
    if search is not None:
        ambient = str(search)
    if not terms:
        raise InvalidCombinatorArgument(entity.__name__, terms, "at least one term is required")

    with JoinAccumulator() as joins:
        scopes = [resolve(term, entity, ambient) for term in terms]
        for scope in scopes:
            joins.collect(scope)
        for position, scope in enumerate(scopes):
            leaf_constraint(entity, scope, position)

        chain = scopes[0]
        for scope in scopes[1:]:
            chain = chain.or_(scope)

        logger.debug(
            "{}.or_chain folded {} term(s), requirements={}",
            entity.__name__,
            len(scopes),
            joins.as_mapping(),
        )
        joined = joins.apply(entity.scope())
        return joined.where(conjoin(chain.conditions))
