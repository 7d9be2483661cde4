"""``Searchable`` — the entity-type mixin for SQLAlchemy declarative models.

Each subclass owns an immutable :class:`OperationTable`, seeded from its
parent's (or, for the first Searchable in a hierarchy, from the built-in
``matching_vector`` / ``non_matching_vector`` operations).  Operations,
guards and default scopes are registered with explicit calls after the class
body::

    class Comment(Searchable, Base):
        __tablename__ = "comments"
        ...

    Comment.define_default_scope(lambda cls: cls.enabled.is_(True))
    Comment.define_scope("snarky", lambda cls: cls.where(cls.comment == "cat pictures"))
    Comment.define_scope("smart", lambda cls: cls.where(cls.comment == "try googling it"))

    Comment.or_chain("snarky", "smart")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

from scope_chain.chain import builder
from scope_chain.registry import OperationTable
from scope_chain.scope import Scope, grouped
from scope_chain.search import guard, ops, vector
from scope_chain.settings import get_settings

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from scope_chain.settings import ChainSettings


class Searchable:
    """Mixin adding scope combinators and search operations to a mapped class."""

    # Per-class state, replaced (never mutated) by the define_* registrations.
    _scope_operations = None
    _search_guard = None
    _default_scope = None
    search_settings = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        parent = cls._scope_operations
        if parent is not None:
            cls._scope_operations = parent.for_entity(cls.__name__)
            return
        cls._scope_operations = OperationTable(cls.__name__)
        vector.define_matching_vector(cls)
        vector.define_non_matching_vector(cls)

    # -- registration -------------------------------------------------------

    @classmethod
    def define_scope(cls, name: str, fn: Callable[..., Scope]) -> None:
        """Register ``fn(cls, *args) -> Scope`` under *name*; last registration wins."""
        cls._scope_operations = cls._scope_operations.with_operation(name, fn)
        logger.debug("{}: declared operation {!r}", cls.__name__, name)

    @classmethod
    def define_default_scope(cls, fn: Callable[[type], Any]) -> None:
        """Register conditions applied to every scope built from this entity."""
        cls._default_scope = fn

    @classmethod
    def define_search_filter(cls, guard_fn: Callable[[str], bool]) -> None:
        """Override the empty-term guard; a true result skips filtering."""
        cls._search_guard = guard_fn

    @classmethod
    def define_matching_vector(cls, name: str | None = None, **options: Any) -> str:
        return vector.define_matching_vector(cls, name, **options)

    @classmethod
    def define_non_matching_vector(cls, name: str | None = None, **options: Any) -> str:
        return vector.define_non_matching_vector(cls, name, **options)

    @classmethod
    def define_matching_vectors(cls, name: str | None = None, **options: Any) -> tuple[str, str]:
        return vector.define_matching_vectors(cls, name, **options)

    # -- introspection ------------------------------------------------------

    @classmethod
    def operations(cls) -> OperationTable:
        return cls._scope_operations

    @classmethod
    def search_guard(cls) -> Callable[[str], bool] | None:
        return cls._search_guard

    @classmethod
    def chain_settings(cls) -> ChainSettings:
        return cls.search_settings or get_settings()

    @classmethod
    def call(cls, name: str, *args: Any) -> Scope:
        """Invoke the operation declared under *name*."""
        return cls._scope_operations[name](cls, *args)

    # -- scope construction -------------------------------------------------

    @classmethod
    def unscoped(cls) -> Scope:
        return Scope(cls)

    @classmethod
    def scope(cls) -> Scope:
        """The unfiltered scope: every row the default scope admits."""
        if cls._default_scope is None:
            return Scope(cls)
        default = cls._default_scope(cls)
        conditions = tuple(default) if isinstance(default, list | tuple) else (default,)
        conditions = tuple(grouped(c) for c in conditions)
        return Scope(cls, conditions=conditions)

    @classmethod
    def where(cls, *conditions: Any, **params: Any) -> Scope:
        return cls.scope().where(*conditions, **params)

    @classmethod
    def filter_by(cls, **values: Any) -> Scope:
        return cls.scope().filter_by(**values)

    @classmethod
    def none(cls) -> Scope:
        return cls.scope().none()

    @classmethod
    def joins(cls, *names: str) -> Scope:
        return cls.scope().joins(*names)

    @classmethod
    def eager_load(cls, *names: str) -> Scope:
        return cls.scope().eager_load(*names)

    @classmethod
    def preload(cls, *names: str) -> Scope:
        return cls.scope().preload(*names)

    @classmethod
    def includes(cls, *names: str) -> Scope:
        return cls.scope().includes(*names)

    # -- search -------------------------------------------------------------

    @classmethod
    def search_filter(cls, term: Any, fallback: Callable[[], Scope]) -> Scope:
        return guard.search_filter(cls, term, fallback)

    @classmethod
    def or_chain(cls, *terms: Any, search: str | None = None) -> Scope:
        return builder.or_chain(cls, *terms, search=search)

    @classmethod
    def search_or_chain(cls, search: Any, *terms: Any) -> Scope:
        return ops.search_or_chain(cls, search, *terms)

    @classmethod
    def simple_search(cls, terms: Any, column_or_condition: Any) -> Scope:
        return ops.simple_search(cls, terms, column_or_condition)

    @classmethod
    def searchable_by_id(cls, term: Any, condition: str | None = None) -> Scope:
        return ops.searchable_by_id(cls, term, condition)

    @classmethod
    def matching_searchable(cls, term: Any, id_op: str = "id_searches", text_op: str = "text_searches") -> Scope:
        return ops.matching_searchable(cls, term, id_op, text_op)

    @classmethod
    def widened_search(cls, terms: Any, column: Any, target: type[Searchable] | None = None) -> Scope:
        return ops.widened_search(cls, terms, column, target)

    @classmethod
    def match_terms_using_vector(
        cls,
        term: Any,
        *,
        column: str | None = None,
        without: bool = False,
        tsvector: Sequence[str] | None = None,
    ) -> Scope:
        return vector.match_terms_using_vector(cls, term, column=column, without=without, tsvector=tsvector)

    @classmethod
    def matching_vector(cls, term: Any) -> Scope:
        return cls.call(vector.MATCHING_VECTOR, term)

    @classmethod
    def non_matching_vector(cls, term: Any) -> Scope:
        return cls.call(vector.NON_MATCHING_VECTOR, term)
