"""Shared fixtures for outline tests."""
import pytest

from pdf_outlines.adapters.store.memory_store import InMemoryObjectStore
from pdf_outlines.config.settings import SettingsLoader
from pdf_outlines.core.outline import OutlineRoot


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Isolate every test from ambient OUTLINES_* settings."""
    for name in (
        "OUTLINES_CONFIG",
        "OUTLINES_MAX_LOAD_DEPTH",
        "OUTLINES_MAX_LOAD_ITEMS",
        "OUTLINES_REDIS_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)
    SettingsLoader.reset_instance()
    yield
    SettingsLoader.reset_instance()


@pytest.fixture
def store():
    return InMemoryObjectStore()


@pytest.fixture
def root(store):
    return OutlineRoot.create(store)


def _assert_consistent(root):
    """Check sibling, endpoint and parent invariants for every level."""
    pending = [root]
    while pending:
        parent = pending.pop()
        children = list(parent.children())
        if not children:
            assert parent.first is None
            assert parent.last is None
            continue
        assert parent.first is children[0]
        assert parent.last is children[-1]
        assert children[0].prev is None
        assert children[-1].next is None
        for left, right in zip(children, children[1:]):
            assert left.next is right
            assert right.prev is left
        for child in children:
            assert child.parent is parent
        pending.extend(children)
    assert root.parent is None
    assert root.prev is None
    assert root.next is None


@pytest.fixture
def assert_consistent():
    """Invariant checker for a whole tree."""
    return _assert_consistent
