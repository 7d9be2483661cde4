"""Shared test fixtures for scope-chain."""

from __future__ import annotations

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from tests.models import Author, Base, Comment, Post

# Comment rows: id -> (enabled, text, post, author)
COMMENTS = {
    1: (True, "cat pictures", 1, 1),
    2: (True, "try googling it", 2, 2),
    3: (False, "cat pictures", 1, 2),
    4: (True, "nice post", 2, 1),
    5: (False, "try googling it", 2, 1),
    6: (True, "100% agree_", 1, 2),
}


@pytest.fixture
def engine():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Session over a seeded in-memory database: posts "Cats"/"Dogs", authors ann/bob."""
    with Session(engine) as session:
        session.add_all([Post(id=1, title="Cats"), Post(id=2, title="Dogs")])
        session.add_all([Author(id=1, name="ann"), Author(id=2, name="bob")])
        session.add_all(
            Comment(id=cid, enabled=enabled, comment=text, post_id=post_id, author_id=author_id)
            for cid, (enabled, text, post_id, author_id) in COMMENTS.items()
        )
        session.commit()
        yield session


@pytest.fixture
def fetch_ids(session):
    """Execute a scope and return the matched ids as a set."""

    def _fetch(scope):
        return {row.id for row in scope.fetch(session)}

    return _fetch


@pytest.fixture
def isolated_comment(monkeypatch):
    """Comment whose registrations are rolled back after the test."""
    monkeypatch.setattr(Comment, "_scope_operations", Comment._scope_operations)
    monkeypatch.setattr(Comment, "_search_guard", Comment._search_guard)
    monkeypatch.setattr(Comment, "search_settings", Comment.search_settings)
    return Comment


@pytest.fixture
def sql():
    """Render a scope's SELECT with bound values inlined."""

    def _render(scope):
        return str(scope.to_select().compile(compile_kwargs={"literal_binds": True}))

    return _render
