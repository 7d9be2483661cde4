"""Tests for operation tables and entity registration."""

from __future__ import annotations

import pytest

from scope_chain import ScopeChainError, UndeclaredOperation
from scope_chain.registry import Operation, OperationTable
from tests.models import Comment, Post


def _zero(cls):
    return cls.scope()


def _one(cls, term):
    return cls.scope()


class TestOperation:
    def test_zero_argument(self):
        assert not Operation.from_callable("zero", _zero).accepts_argument

    def test_one_argument(self):
        assert Operation.from_callable("one", _one).accepts_argument

    def test_optional_argument(self):
        assert Operation.from_callable("opt", lambda cls, term="": cls.scope()).accepts_argument

    def test_varargs(self):
        assert Operation.from_callable("var", lambda cls, *args: cls.scope()).accepts_argument

    def test_call_passes_entity(self):
        op = Operation.from_callable("one", lambda cls, term: (cls, term))
        assert op(Comment, "x") == (Comment, "x")


class TestOperationTable:
    def test_with_operation_returns_new_table(self):
        empty = OperationTable("Thing")
        table = empty.with_operation("zero", _zero)
        assert "zero" not in empty
        assert "zero" in table
        assert len(table) == 1

    def test_last_registration_wins(self):
        table = OperationTable("Thing").with_operation("op", _zero).with_operation("op", _one)
        assert table["op"].fn is _one
        assert table.names() == ["op"]

    def test_undeclared_lookup(self):
        with pytest.raises(UndeclaredOperation, match="Thing declares no operation 'missing'"):
            OperationTable("Thing")["missing"]

    def test_undeclared_is_key_error_and_chain_error(self):
        err = UndeclaredOperation("Thing", "missing")
        assert isinstance(err, KeyError)
        assert isinstance(err, ScopeChainError)
        assert str(err) == "Thing declares no operation 'missing'"

    def test_non_string_not_contained(self):
        table = OperationTable("Thing").with_operation("op", _zero)
        assert 1 not in table
        assert table.get("missing") is None


class TestEntityRegistration:
    def test_builtin_vector_operations(self):
        for entity in (Comment, Post):
            assert "matching_vector" in entity.operations()
            assert "non_matching_vector" in entity.operations()

    def test_tables_are_per_entity(self):
        assert "snarky" in Comment.operations()
        assert "snarky" not in Post.operations()
        assert "titled" in Post.operations()

    def test_define_scope_swaps_table(self, isolated_comment):
        before = isolated_comment.operations()
        isolated_comment.define_scope("fresh", _zero)
        assert "fresh" not in before
        assert "fresh" in isolated_comment.operations()

    def test_call(self, fetch_ids):
        assert fetch_ids(Comment.call("snarky")) == {1}
        assert fetch_ids(Post.call("titled", "Dogs")) == {2}

    def test_call_undeclared(self):
        with pytest.raises(UndeclaredOperation):
            Comment.call("nope")
