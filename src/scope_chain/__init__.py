"""scope-chain — OR-combination of query scopes with guarded search helpers."""

from __future__ import annotations

from scope_chain.chain import JoinAccumulator, OperationCallRef, OperationRef, ScopeRef, or_chain
from scope_chain.errors import EmptyScopeConstraint, InvalidCombinatorArgument, ScopeChainError, UndeclaredOperation
from scope_chain.registry import Operation, OperationTable
from scope_chain.scope import JoinKind, Scope, raw_condition, sanitize_like
from scope_chain.searchable import Searchable
from scope_chain.settings import ChainSettings, get_settings

__all__ = [
    "ChainSettings",
    "EmptyScopeConstraint",
    "InvalidCombinatorArgument",
    "JoinAccumulator",
    "JoinKind",
    "Operation",
    "OperationCallRef",
    "OperationRef",
    "OperationTable",
    "Scope",
    "ScopeChainError",
    "ScopeRef",
    "Searchable",
    "UndeclaredOperation",
    "get_settings",
    "or_chain",
    "raw_condition",
    "sanitize_like",
]
