"""Higher-level search patterns built on the guard and the OR chain.

Bad search input never raises here: empty terms skip filtering and malformed
or mixed input yields the contradiction scope.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from numbers import Integral
from typing import TYPE_CHECKING, Any

from scope_chain.chain.builder import or_chain
from scope_chain.scope import is_condition, resolve_column, sanitize_like
from scope_chain.search.guard import is_guarded, normalize_term, search_filter

if TYPE_CHECKING:
    from scope_chain.scope import Scope
    from scope_chain.searchable import Searchable

_ID_TERM = re.compile(r"\A\s*[0-9]+\s*\Z")


def is_id_term(term: Any) -> bool:
    return bool(_ID_TERM.match(normalize_term(term)))


def _as_terms(terms: Any) -> list[Any]:
    if isinstance(terms, str | bytes) or not isinstance(terms, Iterable):
        return [terms]
    return list(terms)


# ---------------------------------------------------------------------------
# Guarded searches
# ---------------------------------------------------------------------------


def search_or_chain(entity: type[Searchable], search: Any, *terms: Any) -> Scope:
    """``or_chain`` over *terms* with *search* as the ambient term, skipped when *search* is empty."""
    return search_filter(entity, search, lambda: or_chain(entity, *terms, search=normalize_term(search)))


def _term_scope(entity: type[Searchable], term: Any, column_or_condition: Any) -> Scope:
    def build() -> Scope:
        if is_condition(column_or_condition):
            if isinstance(column_or_condition, Mapping):
                return entity.scope().filter_by(**column_or_condition)
            return entity.scope().where(column_or_condition)
        settings = entity.chain_settings().text
        column = resolve_column(entity, column_or_condition)
        pattern = f"%{sanitize_like(normalize_term(term).strip(), settings.escape_char)}%"
        match = column.ilike if settings.case_insensitive else column.like
        return entity.scope().where(match(pattern, escape=settings.escape_char))

    return search_filter(entity, term, build)


def simple_search(entity: type[Searchable], terms: Any, column_or_condition: Any) -> Scope:
    """Substring (or structured-condition) search, OR-chained across several terms.

    *column_or_condition* is either a column (mapped attribute, attribute name
    or qualified SQL column) matched with ``LIKE '%term%'``, or a structured
    condition (mapping, boolean expression, raw ``text``) applied as-is.
    """
    terms = _as_terms(terms)
    if not terms or any(is_guarded(entity, term) for term in terms):
        # OR with an unfiltered term matches everything.
        return entity.scope()
    scopes = [_term_scope(entity, term, column_or_condition) for term in terms]
    if len(scopes) == 1:
        return scopes[0]
    return or_chain(entity, *scopes)


def searchable_by_id(entity: type[Searchable], term: Any, condition: str | None = None) -> Scope:
    """Match rows by id when *term* is all digits, otherwise match nothing.

    *condition* is a raw equality template using ``:search``; the default is
    ``<table>.id = :search``.
    """

    def build() -> Scope:
        if not is_id_term(term):
            return entity.none()
        template = condition or f"{entity.__table__.name}.id = :search"
        return entity.scope().where(template, search=int(normalize_term(term).strip()))

    return search_filter(entity, term, build)


def matching_searchable(
    entity: type[Searchable],
    term: Any,
    id_op: str = "id_searches",
    text_op: str = "text_searches",
) -> Scope:
    """Route all-digit terms to *id_op* and anything else to *text_op*."""
    operations = entity.operations()
    id_operation, text_operation = operations[id_op], operations[text_op]

    def build() -> Scope:
        operation = id_operation if is_id_term(term) else text_operation
        return operation(entity, normalize_term(term))

    return search_filter(entity, term, build)


def widened_search(
    entity: type[Searchable],
    terms: Any,
    column: Any,
    target: type[Searchable] | None = None,
) -> Scope:
    """Dispatch on the kind of *terms*: text, ids, or entity instances.

    Empty input, mixed kinds or an unsupported kind yield the contradiction
    scope.
    """
    target = target or entity
    terms = _as_terms(terms)
    kinds = {type(term) for term in terms}
    if len(kinds) != 1:
        return target.none()
    kind = kinds.pop()
    if issubclass(kind, str):
        return simple_search(target, terms, column)
    if issubclass(kind, entity):
        ids = [instance.id for instance in terms]
    elif issubclass(kind, Integral) and not issubclass(kind, bool):
        ids = terms
    else:
        return target.none()
    if len(ids) == 1:
        return searchable_by_id(target, ids[0])
    return or_chain(target, *(searchable_by_id(target, value) for value in ids))
