"""Immutable query scopes over SQLAlchemy ORM statements.

A :class:`Scope` is an unexecuted query: a tuple of top-level boolean
conditions plus four association-requirement sets (joins, eager loads,
preloads, includes).  Every combinator returns a new scope; none mutates its
receiver.  ``to_select()`` compiles the scope into a SQLAlchemy ``Select``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Boolean,
    ColumnElement,
    TextClause,
    and_,
    bindparam,
    false,
    func,
    inspect,
    literal_column,
    or_,
    select,
    text,
)
from sqlalchemy.orm import contains_eager, joinedload, selectinload
from sqlalchemy.sql.elements import Grouping

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.orm import Session

# ---------------------------------------------------------------------------
# Requirement kinds
# ---------------------------------------------------------------------------


class JoinKind(StrEnum):
    # Declaration order is application order.
    JOINS = "joins"
    EAGER_LOAD = "eager_load"
    PRELOAD = "preload"
    INCLUDES = "includes"


_REQUIREMENT_FIELDS: dict[JoinKind, str] = {
    JoinKind.JOINS: "joins_values",
    JoinKind.EAGER_LOAD: "eager_load_values",
    JoinKind.PRELOAD: "preload_values",
    JoinKind.INCLUDES: "includes_values",
}


def dedupe(names: Iterable[str]) -> tuple[str, ...]:
    """Drop repeated names, keeping first-seen order."""
    return tuple(dict.fromkeys(names))


# ---------------------------------------------------------------------------
# Condition helpers
# ---------------------------------------------------------------------------


def raw_condition(sql: str, **params: Any) -> TextClause:
    """Build a raw SQL condition with its parameter bindings.

    The SQL is parenthesized so it stays one leaf when ANDed or ORed with other
    conditions.  Bind parameters are marked unique so two raw conditions using
    the same placeholder name (``:search``) can share one statement.
    """
    clause = text(f"({sql})")
    if params:
        clause = clause.bindparams(*(bindparam(key, value, unique=True) for key, value in params.items()))
    return clause


def sanitize_like(term: str, escape_char: str = "\\") -> str:
    """Escape LIKE wildcards so *term* matches literally."""
    return (
        term.replace(escape_char, escape_char * 2)
        .replace("%", f"{escape_char}%")
        .replace("_", f"{escape_char}_")
    )


def is_condition(value: Any) -> bool:
    """True for structured conditions: mappings, raw SQL, boolean expressions."""
    if isinstance(value, Mapping | TextClause):
        return True
    return isinstance(value, ColumnElement) and isinstance(value.type, Boolean)


def resolve_column(entity: type, column: Any) -> Any:
    """Turn an attribute name or qualified SQL column name into a column expression."""
    if not isinstance(column, str):
        return column
    attrs = inspect(entity).attrs
    if column in attrs:
        return attrs[column].class_attribute
    return literal_column(column)


def grouped(condition: Any) -> Any:
    """Parenthesize raw SQL clauses; other conditions group themselves when combined."""
    if isinstance(condition, TextClause):
        return Grouping(condition)
    return condition


def conjoin(conditions: tuple[Any, ...]) -> Any:
    """Collapse a condition list into one top-level condition."""
    if len(conditions) == 1:
        return conditions[0]
    return and_(*conditions)


# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class Scope:
    """An unexecuted query against one mapped entity."""

    entity: type
    conditions: tuple[Any, ...] = ()
    joins_values: tuple[str, ...] = ()
    eager_load_values: tuple[str, ...] = ()
    preload_values: tuple[str, ...] = ()
    includes_values: tuple[str, ...] = ()

    def __repr__(self) -> str:
        requirements = {kind.value: names for kind in JoinKind if (names := self.requirements(kind))}
        return f"<Scope {self.entity.__name__} conditions={len(self.conditions)} requirements={requirements}>"

    # -- conditions ---------------------------------------------------------

    def where(self, *conditions: Any, **params: Any) -> Scope:
        """Append conditions; string conditions are raw SQL bound with *params*."""
        clauses = tuple(raw_condition(c, **params) if isinstance(c, str) else grouped(c) for c in conditions)
        return dataclasses.replace(self, conditions=self.conditions + clauses)

    def filter_by(self, **values: Any) -> Scope:
        attrs = inspect(self.entity).attrs
        return self.where(*(attrs[key].class_attribute == value for key, value in values.items()))

    def none(self) -> Scope:
        """A contradiction: matches no rows."""
        return self.where(false())

    def or_(self, other: Scope) -> Scope:
        """OR this scope's leaf condition with *other*'s.

        An operand without conditions matches everything, so the result is
        unconstrained.  Requirements of ``self`` are kept.
        """
        if not self.conditions or not other.conditions:
            return dataclasses.replace(self, conditions=())
        combined = or_(conjoin(self.conditions), conjoin(other.conditions))
        return dataclasses.replace(self, conditions=(combined,))

    # -- association requirements -------------------------------------------

    def requirements(self, kind: JoinKind) -> tuple[str, ...]:
        return getattr(self, _REQUIREMENT_FIELDS[JoinKind(kind)])

    def with_requirements(self, kind: JoinKind, names: Iterable[str]) -> Scope:
        """Add association names to one requirement set."""
        kind = JoinKind(kind)
        merged = dedupe((*self.requirements(kind), *names))
        return dataclasses.replace(self, **{_REQUIREMENT_FIELDS[kind]: merged})

    def joins(self, *names: str) -> Scope:
        return self.with_requirements(JoinKind.JOINS, names)

    def eager_load(self, *names: str) -> Scope:
        return self.with_requirements(JoinKind.EAGER_LOAD, names)

    def preload(self, *names: str) -> Scope:
        return self.with_requirements(JoinKind.PRELOAD, names)

    def includes(self, *names: str) -> Scope:
        return self.with_requirements(JoinKind.INCLUDES, names)

    # -- compilation --------------------------------------------------------

    def _association(self, name: str) -> Any:
        relationship = inspect(self.entity).relationships.get(name)
        if relationship is None:
            msg = f"{self.entity.__name__} has no association {name!r}"
            raise ValueError(msg)
        return relationship.class_attribute

    def _filtered_select(self) -> Select:
        stmt = select(self.entity)
        for name in self.joins_values:
            stmt = stmt.join(self._association(name))
        if self.conditions:
            stmt = stmt.where(*self.conditions)
        return stmt

    def to_select(self) -> Select:
        """Compile into a SQLAlchemy ``Select`` with loader options."""
        options = []
        loaded: set[str] = set()
        for name in self.eager_load_values:
            options.append(joinedload(self._association(name)))
            loaded.add(name)
        for name in self.preload_values:
            if name not in loaded:
                options.append(selectinload(self._association(name)))
                loaded.add(name)
        for name in self.includes_values:
            if name in loaded:
                continue
            attr = self._association(name)
            options.append(contains_eager(attr) if name in self.joins_values else selectinload(attr))
        stmt = self._filtered_select()
        if options:
            stmt = stmt.options(*options)
        return stmt

    def fetch(self, session: Session) -> list[Any]:
        """Execute and return the matched entities."""
        return list(session.scalars(self.to_select()).unique())

    def count(self, session: Session) -> int:
        subquery = self._filtered_select().subquery()
        return session.scalar(select(func.count()).select_from(subquery)) or 0
