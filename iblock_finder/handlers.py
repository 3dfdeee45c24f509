#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import print_function

__author__ = "bibow"

import functools
import logging
from typing import Any, Dict, Optional

from deepdiff import DeepDiff

from .cache_utils import CacheStore
from .iblock import COLLECTION_TAG, NEW_IBLOCK_TAG, iblock_tag

default_logger = logging.getLogger(__name__)


def _get_payload(args, kwargs) -> Dict[str, Any]:
    payload = dict(args[0]) if args and isinstance(args[0], dict) else {}
    payload.update(kwargs)
    return payload


def _clear(cache_store: CacheStore, tag: str, event: str, logger: logging.Logger) -> int:
    cleared = cache_store.clear_by_tag(tag)
    logger.info(f"The {tag} cache ({cleared} entries) is cleared on {event}.")
    return cleared


def on_iblock_delete(
    cache_store: CacheStore, *args: Any, logger: Optional[logging.Logger] = None, **kwargs: Any
) -> int:
    return _clear(cache_store, COLLECTION_TAG, "iblock delete", logger or default_logger)


def on_iblock_add(
    cache_store: CacheStore, *args: Any, logger: Optional[logging.Logger] = None, **kwargs: Any
) -> int:
    logger = logger or default_logger
    cleared = _clear(cache_store, COLLECTION_TAG, "iblock add", logger)
    ## The lite shard also stands for the iblocks it has not seen yet.
    return cleared + _clear(cache_store, NEW_IBLOCK_TAG, "iblock add", logger)


def on_iblock_update(
    cache_store: CacheStore, *args: Any, logger: Optional[logging.Logger] = None, **kwargs: Any
) -> int:
    logger = logger or default_logger
    payload = _get_payload(args, kwargs)

    if payload.get("old") is not None and payload.get("new") is not None:
        data_diff = DeepDiff(payload["old"], payload["new"], ignore_order=True)
        if data_diff:
            logger.info(f"Iblock updated: {data_diff.to_json()}.")

    return _clear(cache_store, COLLECTION_TAG, "iblock update", logger)


def clear_iblock_cache(
    cache_store: CacheStore, iblock_id: Any, logger: Optional[logging.Logger] = None
) -> int:
    """Clear the cached entries of one iblock: its own shard and the lite shard."""
    return _clear(
        cache_store, iblock_tag(iblock_id), f"iblock #{iblock_id} change", logger or default_logger
    )


INVALIDATION_EVENTS = {
    "iblock.deleted": on_iblock_delete,
    "iblock.added": on_iblock_add,
    "iblock.updated": on_iblock_update,
}


def register_invalidation_handlers(
    event_bus: Any, cache_store: CacheStore, logger: Optional[logging.Logger] = None
) -> None:
    """Subscribe the hooks on an event bus exposing ``subscribe(name, callback)``."""
    for event_name, handler in INVALIDATION_EVENTS.items():
        event_bus.subscribe(
            event_name, functools.partial(handler, cache_store, logger=logger)
        )
