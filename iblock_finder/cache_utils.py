# -*- coding: utf-8 -*-
from __future__ import annotations

__author__ = "bibow"

import copy
import hashlib
import json
import logging
import math
import threading
import time
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, FrozenSet, Iterable, NamedTuple, Optional

from cachetools import TLRUCache

from .decorators import datastore_retry
from .models import CacheEntryModel, DoesNotExist

DEFAULT_CACHE_TTL = 86400
DEFAULT_CACHE_MAXSIZE = 1024


def build_cache_key(namespace: str, strategy_name: str, shard: Any) -> str:
    """Cache key of one shard, stable across processes for the same inputs."""
    raw = "|".join([namespace, strategy_name, str(shard)])
    return hashlib.md5(raw.encode("utf-8")).hexdigest()


class CacheStore(ABC):
    """Key/value cache with per-entry TTL and tag based bulk invalidation."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on a miss."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int, tags: Iterable[str]) -> None:
        pass

    @abstractmethod
    def clear_by_tag(self, tag: str) -> int:
        """Drop every entry carrying ``tag`` and return how many went."""


class CacheEntry(NamedTuple):
    value: Any
    ttl: int
    tags: FrozenSet[str]


def _time_to_use(key: str, entry: CacheEntry, now: float) -> float:
    return now + entry.ttl if entry.ttl and entry.ttl > 0 else math.inf


class MemoryCacheStore(CacheStore):
    """
    Process-local cache store.

    Entries live in a ``cachetools.TLRUCache``: each one expires after its own
    TTL, and the least recently used go first once ``maxsize`` is reached.
    """

    def __init__(
        self,
        logger: Optional[logging.Logger] = None,
        maxsize: int = DEFAULT_CACHE_MAXSIZE,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self._cache: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_time_to_use, timer=timer)
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._cache.get(key)
        return None if entry is None else copy.deepcopy(entry.value)

    def set(self, key: str, value: Any, ttl: int, tags: Iterable[str]) -> None:
        entry = CacheEntry(copy.deepcopy(value), ttl, frozenset(tags))
        with self._lock:
            self._cache[key] = entry

    def clear_by_tag(self, tag: str) -> int:
        with self._lock:
            self._cache.expire()
            keys = [key for key in list(self._cache) if tag in self._cache[key].tags]
            for key in keys:
                del self._cache[key]
        self.logger.debug("Cleared %s cache entries tagged %s", len(keys), tag)
        return len(keys)


class DynamoDBCacheStore(CacheStore):
    """
    Cache store persisted in the ``CacheEntryModel`` table.

    Values are stored as JSON. DynamoDB removes expired items lazily, so the
    expiry is checked again on every read.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    @datastore_retry
    def get(self, key: str) -> Optional[Any]:
        try:
            entry = CacheEntryModel.get(key)
        except DoesNotExist:
            return None

        if entry.expires_at is not None and entry.expires_at <= datetime.now(
            timezone.utc
        ):
            return None
        return json.loads(entry.value)

    @datastore_retry
    def set(self, key: str, value: Any, ttl: int, tags: Iterable[str]) -> None:
        CacheEntryModel(
            key,
            value=json.dumps(value, sort_keys=True),
            tags=set(tags) or None,
            expires_at=(
                datetime.now(timezone.utc) + timedelta(seconds=ttl)
                if ttl and ttl > 0
                else None
            ),
        ).save()

    @datastore_retry
    def clear_by_tag(self, tag: str) -> int:
        entries = list(
            CacheEntryModel.scan(
                CacheEntryModel.tags.contains(tag),
                attributes_to_get=["cache_key"],
            )
        )
        with CacheEntryModel.batch_write() as batch:
            for entry in entries:
                batch.delete(entry)
        self.logger.debug("Cleared %s cache entries tagged %s", len(entries), tag)
        return len(entries)


__all__ = [
    "DEFAULT_CACHE_TTL",
    "DEFAULT_CACHE_MAXSIZE",
    "build_cache_key",
    "CacheStore",
    "MemoryCacheStore",
    "DynamoDBCacheStore",
]
