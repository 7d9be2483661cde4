"""Full-text vector predicates (PostgreSQL ``@@`` against a tsvector column).

``match_terms_using_vector`` splits a comma-separated term into fragments and
binds each as ``:search{i}``.  Match mode ORs the fragments (rows matching any
accepted term); ``without`` mode negates each fragment and ANDs them (rows
matching none of the excluded terms).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scope_chain.scope import Scope
    from scope_chain.searchable import Searchable
    from scope_chain.settings import VectorSettings

MATCHING_VECTOR = "matching_vector"
NON_MATCHING_VECTOR = "non_matching_vector"

_VECTOR_OPTIONS = frozenset({"column", "tsvector"})


def _tsquery(tsvector: Sequence[str] | None, settings: VectorSettings) -> tuple[str, str]:
    if not tsvector:
        return settings.tsquery_function, settings.language
    if isinstance(tsvector, str) or len(tsvector) != 2:
        logger.warning("Ignoring malformed tsvector option {!r}, expected (function, language)", tsvector)
        return settings.tsquery_function, settings.language
    function, language = tsvector
    return function, language


def vector_predicate(
    term: Any,
    column: str,
    *,
    without: bool = False,
    tsvector: Sequence[str] | None = None,
    settings: VectorSettings,
) -> tuple[str, dict[str, str]]:
    """Build the raw predicate and its bindings for a comma-separated *term*.

    Returns ``("", {})`` when no fragment survives trimming.
    """
    function, language = _tsquery(tsvector, settings)
    prefix = "not " if without else ""
    fragments = [part.strip() for part in ("" if term is None else str(term)).split(",")]
    params: dict[str, str] = {}
    clauses: list[str] = []
    for index, fragment in enumerate(f for f in fragments if f):
        key = f"search{index}"
        params[key] = fragment
        clauses.append(f"{prefix}{column} @@ {function}('{language}', :{key})")
    return (" and " if without else " or ").join(clauses), params


def match_terms_using_vector(
    entity: type[Searchable],
    term: Any,
    *,
    column: str | None = None,
    without: bool = False,
    tsvector: Sequence[str] | None = None,
) -> Scope:
    settings = entity.chain_settings().vector
    column = column or f"{entity.__table__.name}.{settings.column_name}"
    sql, params = vector_predicate(term, column, without=without, tsvector=tsvector, settings=settings)
    if not sql:
        return entity.scope()
    return entity.scope().where(sql, **params)


# ---------------------------------------------------------------------------
# Declaration-time factories
# ---------------------------------------------------------------------------


def vector_operation_name(default: str, name: str | None) -> str:
    return name if name and name != default else default


def _check_options(options: dict[str, Any]) -> dict[str, Any]:
    unknown = set(options) - _VECTOR_OPTIONS
    if unknown:
        msg = f"Unknown vector option(s): {', '.join(sorted(unknown))}"
        raise TypeError(msg)
    return options


def define_matching_vector(entity: type[Searchable], name: str | None = None, **options: Any) -> str:
    """Register a vector match operation; returns the registered name."""
    options = _check_options(options)
    name = vector_operation_name(MATCHING_VECTOR, name)

    def matching(cls: type[Searchable], term: Any) -> Scope:
        return match_terms_using_vector(cls, term, **options)

    entity.define_scope(name, matching)
    return name


def define_non_matching_vector(entity: type[Searchable], name: str | None = None, **options: Any) -> str:
    """Register a vector non-match operation; returns the registered name."""
    options = _check_options(options)
    name = vector_operation_name(NON_MATCHING_VECTOR, name)

    def non_matching(cls: type[Searchable], term: Any) -> Scope:
        return match_terms_using_vector(cls, term, without=True, **options)

    entity.define_scope(name, non_matching)
    return name


def define_matching_vectors(entity: type[Searchable], name: str | None = None, **options: Any) -> tuple[str, str]:
    """Register a match/non-match pair: ``name`` and ``non_<name>``."""
    matching = define_matching_vector(entity, name, **options)
    non_name = f"non_{name}" if name and name != MATCHING_VECTOR else None
    non_matching = define_non_matching_vector(entity, non_name, **options)
    return matching, non_matching
