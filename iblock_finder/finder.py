# -*- coding: utf-8 -*-
from __future__ import annotations

__author__ = "bibow"

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional, Set

from .cache_utils import DEFAULT_CACHE_TTL, CacheStore, build_cache_key
from .decorators import monitor_decorator
from .exceptions import InvalidFilterError
from .types import LookupRequest

DEFAULT_CACHE_NAMESPACE = "iblock_finder"


def _prepare_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidFilterError(key)
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise InvalidFilterError(key)
    if value <= 0:
        raise InvalidFilterError(key)
    return value


def _prepare_str(key: str, value: Any) -> str:
    if value is None or isinstance(value, bool):
        raise InvalidFilterError(key)
    value = str(value).strip()
    if not value:
        raise InvalidFilterError(key)
    return value


def prepare_filter(
    filter: Optional[Dict[str, Any]],
    int_keys: Iterable[str] = ("id",),
    str_keys: Iterable[str] = ("type", "code"),
) -> Dict[str, Any]:
    """
    Validate and normalize a finder filter.

    Args:
        filter: Mapping of filter key to value
        int_keys: Keys whose values must be positive integers
        str_keys: Keys whose values must be non-empty strings

    Returns:
        A new dictionary with integers coerced and strings trimmed and escaped

    Raises:
        InvalidFilterError: The filter is empty, has an unknown key, an invalid
            value, or identifies nothing (no ``id`` and not both ``type`` and
            ``code``)
    """
    if not filter:
        raise InvalidFilterError(message="The filter is empty.")

    int_keys = set(int_keys)
    str_keys = set(str_keys)
    prepared: Dict[str, Any] = {}
    for key, value in filter.items():
        if key in int_keys:
            prepared[key] = _prepare_int(key, value)
        elif key in str_keys:
            prepared[key] = _prepare_str(key, value)
        else:
            raise InvalidFilterError(key, f"Unknown filter key ({key}).")

    if "id" not in prepared and not ("type" in prepared and "code" in prepared):
        missing = "type" if "type" not in prepared else "code"
        raise InvalidFilterError(
            missing, "The filter must contain id, or both type and code."
        )
    return prepared


class ShardStrategy(ABC):
    """How one kind of finder builds and reads its shards."""

    name: str = ""

    @abstractmethod
    def build_shard(self, shard: Any) -> Dict[str, Any]:
        """Load the whole structure of ``shard`` from the data source."""

    @abstractmethod
    def resolve(self, structure: Dict[str, Any], request: LookupRequest, shard: Any) -> Any:
        """Read the value ``request`` points at inside a shard structure."""

    def shard_tags(self, shard: Any, structure: Dict[str, Any]) -> Set[str]:
        return set()


class ShardCache:
    """
    Cache-check, rebuild-on-miss and resolve, shared by every finder.

    A shard is cached as one unit under a single key, so distinct lookups in
    the same shard cost at most one cold build.
    """

    def __init__(
        self,
        strategy: ShardStrategy,
        cache_store: CacheStore,
        logger: Optional[logging.Logger] = None,
        ttl: int = DEFAULT_CACHE_TTL,
        collection_tag: str = "",
        namespace: str = DEFAULT_CACHE_NAMESPACE,
    ):
        self.strategy = strategy
        self.cache_store = cache_store
        self.logger = logger or logging.getLogger(__name__)
        self.ttl = ttl
        self.collection_tag = collection_tag
        self.namespace = namespace

    def cache_key(self, shard: Any) -> str:
        return build_cache_key(self.namespace, self.strategy.name, shard)

    def get(self, request: LookupRequest, shard: Any) -> Any:
        key = self.cache_key(shard)
        try:
            structure = self.cache_store.get(key)
        except Exception as e:
            self.logger.warning(
                "Cache read failed on %s shard %s: %s", self.strategy.name, shard, e
            )
            structure = None

        if structure is None:
            self.logger.debug("Cache miss on %s shard %s", self.strategy.name, shard)
            structure = self.build(shard)
            try:
                self.cache_store.set(
                    key, structure, self.ttl, self.tags(shard, structure)
                )
            except Exception as e:
                self.logger.warning(
                    "Cache write failed on %s shard %s: %s",
                    self.strategy.name,
                    shard,
                    e,
                )
        else:
            self.logger.debug("Cache hit on %s shard %s", self.strategy.name, shard)

        return self.strategy.resolve(structure, request, shard)

    @monitor_decorator
    def build(self, shard: Any) -> Dict[str, Any]:
        return self.strategy.build_shard(shard)

    def tags(self, shard: Any, structure: Dict[str, Any]) -> Set[str]:
        tags = set(self.strategy.shard_tags(shard, structure))
        if self.collection_tag:
            tags.add(self.collection_tag)
        return tags


class Finder:
    """
    Base finder: owns the filter contract and the silent mode.

    With ``silent_mode`` a filter that fails validation does not raise; the
    finder is left unresolved (``is_resolved`` is False) and the subclass
    decides what its accessors return.
    """

    int_filter_keys = ("id",)
    str_filter_keys = ("type", "code")

    def __init__(
        self,
        filter: Optional[Dict[str, Any]],
        silent_mode: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(self.__class__.__module__)
        self.silent_mode = silent_mode
        self.filter: Optional[Dict[str, Any]] = None

        try:
            self.filter = self.prepare_filter(filter)
        except InvalidFilterError as e:
            if not silent_mode:
                raise
            self.logger.warning(
                "%s left unresolved by the filter %s: %s",
                self.__class__.__name__,
                filter,
                e,
            )

    @property
    def is_resolved(self) -> bool:
        return self.filter is not None

    def prepare_filter(self, filter: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return prepare_filter(filter, self.int_filter_keys, self.str_filter_keys)
