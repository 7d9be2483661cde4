"""Search-term guard: skip filtering when the term is empty."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Callable

    from scope_chain.scope import Scope
    from scope_chain.searchable import Searchable


def normalize_term(term: Any) -> str:
    """Search terms arrive from request params; treat them as strings."""
    return "" if term is None else str(term)


def default_guard(term: str) -> bool:
    return not term.strip()


def search_filter(entity: type[Searchable], term: Any, fallback: Callable[[], Scope]) -> Scope:
    """Return *entity*'s unfiltered scope if the guard rejects *term*, else ``fallback()``."""
    if is_guarded(entity, term):
        logger.debug("{}: search term {!r} guarded, skipping filter", entity.__name__, normalize_term(term))
        return entity.scope()
    return fallback()


def is_guarded(entity: type[Searchable], term: Any) -> bool:
    """Whether *entity*'s guard (or the default guard) rejects *term*."""
    guard = entity.search_guard() or default_guard
    return bool(guard(normalize_term(term)))
