"""Search package — guarded term filtering, search patterns, and vector predicates."""

from __future__ import annotations

from scope_chain.search.guard import default_guard, is_guarded, normalize_term, search_filter
from scope_chain.search.ops import (
    is_id_term,
    matching_searchable,
    search_or_chain,
    searchable_by_id,
    simple_search,
    widened_search,
)
from scope_chain.search.vector import (
    MATCHING_VECTOR,
    NON_MATCHING_VECTOR,
    define_matching_vector,
    define_matching_vectors,
    define_non_matching_vector,
    match_terms_using_vector,
    vector_operation_name,
    vector_predicate,
)

__all__ = [
    "MATCHING_VECTOR",
    "NON_MATCHING_VECTOR",
    "default_guard",
    "define_matching_vector",
    "define_matching_vectors",
    "define_non_matching_vector",
    "is_guarded",
    "is_id_term",
    "match_terms_using_vector",
    "matching_searchable",
    "normalize_term",
    "search_filter",
    "search_or_chain",
    "searchable_by_id",
    "simple_search",
    "vector_operation_name",
    "vector_predicate",
    "widened_search",
]
