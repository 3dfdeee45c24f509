#!/usr/bin/python
# -*- coding: utf-8 -*-
__author__ = "bibow"

__all__ = [
    "main",
    "models",
    "types",
    "decorators",
    "cache_utils",
    "IblockFinderEngine",
    "IblockFinder",
    "Finder",
    "ShardCache",
    "ShardStrategy",
    "CacheStore",
    "MemoryCacheStore",
    "DynamoDBCacheStore",
    "DataSource",
    "MemoryDataSource",
    "DynamoDBDataSource",
    "IblockFinderError",
    "DependencyUnavailableError",
    "InvalidFilterError",
    "ValueNotFoundError",
    "clear_iblock_cache",
    "on_iblock_add",
    "on_iblock_delete",
    "on_iblock_update",
    "register_invalidation_handlers",
]
from .cache_utils import CacheStore, DynamoDBCacheStore, MemoryCacheStore
from .datasource import DataSource, DynamoDBDataSource, MemoryDataSource
from .exceptions import (
    DependencyUnavailableError,
    IblockFinderError,
    InvalidFilterError,
    ValueNotFoundError,
)
from .finder import Finder, ShardCache, ShardStrategy
from .handlers import (
    clear_iblock_cache,
    on_iblock_add,
    on_iblock_delete,
    on_iblock_update,
    register_invalidation_handlers,
)
from .iblock import IblockFinder
from .main import IblockFinderEngine
