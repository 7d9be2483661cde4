"""Union of association requirements across the sub-scopes of one chain."""

from __future__ import annotations

from typing import TYPE_CHECKING

from scope_chain.scope import JoinKind, dedupe

if TYPE_CHECKING:
    from scope_chain.scope import Scope


class JoinAccumulator:
    """Scratch sets for one chain build: collect, apply, then release.

    Use as a context manager so the sets are released on every exit path::

        with JoinAccumulator() as joins:
            for scope in scopes:
                joins.collect(scope)
            joined = joins.apply(base)
    """

    def __init__(self) -> None:
        self._values: dict[JoinKind, tuple[str, ...]] = {kind: () for kind in JoinKind}

    def __enter__(self) -> JoinAccumulator:
        return self

    def __exit__(self, *args: object) -> None:
        self.release()

    def __bool__(self) -> bool:
        return any(self._values.values())

    def collect(self, scope: Scope) -> None:
        for kind in JoinKind:
            self._values[kind] = dedupe((*self._values[kind], *scope.requirements(kind)))

    def values(self, kind: JoinKind) -> tuple[str, ...]:
        return self._values[JoinKind(kind)]

    def as_mapping(self) -> dict[str, tuple[str, ...]]:
        """Non-empty requirement sets, in application order."""
        return {kind.value: names for kind, names in self._values.items() if names}

    def apply(self, base: Scope) -> Scope:
        """Add the accumulated requirements to *base*, skipping empty kinds."""
        scope = base
        for kind in JoinKind:
            names = self._values[kind]
            if names:
                scope = scope.with_requirements(kind, names)
        return scope

    def release(self) -> None:
        self._values = {kind: () for kind in JoinKind}
