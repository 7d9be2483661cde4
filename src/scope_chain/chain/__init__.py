"""Chain package — argument resolution, join accumulation, and OR folding."""

from __future__ import annotations

from scope_chain.chain.builder import leaf_constraint, or_chain, split_search_option
from scope_chain.chain.joins import JoinAccumulator
from scope_chain.chain.resolver import ChainArg, OperationCallRef, OperationRef, ScopeRef, resolve, to_ref

__all__ = [
    "ChainArg",
    "JoinAccumulator",
    "OperationCallRef",
    "OperationRef",
    "ScopeRef",
    "leaf_constraint",
    "or_chain",
    "resolve",
    "split_search_option",
    "to_ref",
]
