"""Exceptions raised for misuse of the combinators.

Bad *search input* never raises; it degrades to "no filtering" or "no
results".  Only programmer errors in how operations are declared or combined
surface as exceptions.
"""

from __future__ import annotations

from typing import Any


class ScopeChainError(Exception):
    """Base class for scope-chain errors."""


class InvalidCombinatorArgument(ScopeChainError, TypeError):
    """Raised when an ``or_chain`` argument is neither a scope nor a declared operation reference."""

    def __init__(self, entity_name: str, argument: Any, reason: str = "") -> None:
        self.entity_name = entity_name
        self.argument = argument
        detail = reason or "expected a Scope, a declared operation name, or (name, *args) / {name: args}"
        super().__init__(f"{entity_name}.or_chain got {argument!r}: {detail}")


class EmptyScopeConstraint(ScopeChainError):
    """Raised when a sub-scope offered to OR-combination has no condition to extract."""

    def __init__(self, entity_name: str, position: int) -> None:
        self.entity_name = entity_name
        self.position = position
        super().__init__(f"{entity_name}.or_chain term {position} has no condition to OR with")


class UndeclaredOperation(ScopeChainError, KeyError):
    """Raised when a name is looked up that no operation was registered under."""

    def __init__(self, entity_name: str, name: str) -> None:
        self.entity_name = entity_name
        self.name = name
        super().__init__(f"{entity_name} declares no operation {name!r}")

    def __str__(self) -> str:
        # KeyError would repr() the message.
        return str(self.args[0])
