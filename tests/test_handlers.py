"""Tests for handlers.py: the invalidation hooks."""

import logging
from collections import defaultdict

import pytest

from iblock_finder.cache_utils import MemoryCacheStore
from iblock_finder.handlers import (
    INVALIDATION_EVENTS,
    clear_iblock_cache,
    on_iblock_add,
    on_iblock_delete,
    on_iblock_update,
    register_invalidation_handlers,
)


class FakeEventBus:
    def __init__(self):
        self.subscribers = defaultdict(list)

    def subscribe(self, event_name, callback):
        self.subscribers[event_name].append(callback)

    def publish(self, event_name, *args, **kwargs):
        for callback in self.subscribers[event_name]:
            callback(*args, **kwargs)


@pytest.fixture
def seeded_store():
    store = MemoryCacheStore()
    store.set("lite", {"news": {"press": 7}}, 60, {"iblock", "iblock_id_7", "iblock_id_new"})
    store.set("iblock-7", {"type": "news"}, 60, {"iblock", "iblock_id_7"})
    store.set("iblock-9", {"type": "catalog"}, 60, {"iblock", "iblock_id_9"})
    store.set("other", 1, 60, {"section"})
    return store


@pytest.mark.parametrize("hook", [on_iblock_delete, on_iblock_add, on_iblock_update])
def test_hooks_clear_collection(hook, seeded_store):
    assert hook(seeded_store) == 3
    assert seeded_store.get("lite") is None
    assert seeded_store.get("iblock-7") is None
    assert seeded_store.get("iblock-9") is None
    assert seeded_store.get("other") == 1


@pytest.mark.parametrize("hook", [on_iblock_delete, on_iblock_add, on_iblock_update])
def test_hooks_are_idempotent(hook, seeded_store):
    hook(seeded_store, {"id": 7})
    assert hook(seeded_store, id=7) == 0


def test_add_clears_new_iblock_tag():
    store = MemoryCacheStore()
    store.set("lite", {}, 60, {"iblock_id_new"})
    assert on_iblock_add(store) == 1
    assert store.get("lite") is None


def test_update_logs_diff(seeded_store, caplog):
    with caplog.at_level(logging.INFO):
        on_iblock_update(
            seeded_store,
            {"old": {"code": "press"}, "new": {"code": "media"}},
        )
    assert "values_changed" in caplog.text
    assert seeded_store.get("lite") is None


def test_clear_iblock_cache(seeded_store):
    assert clear_iblock_cache(seeded_store, 7) == 2
    assert seeded_store.get("lite") is None
    assert seeded_store.get("iblock-7") is None
    assert seeded_store.get("iblock-9") == {"type": "catalog"}


def test_register_invalidation_handlers(seeded_store):
    event_bus = FakeEventBus()
    register_invalidation_handlers(event_bus, seeded_store)
    assert set(event_bus.subscribers) == set(INVALIDATION_EVENTS)

    event_bus.publish("iblock.updated", {"id": 7})
    assert seeded_store.get("iblock-9") is None

    seeded_store.set("lite", {}, 60, {"iblock"})
    event_bus.publish("iblock.deleted")
    assert seeded_store.get("lite") is None
