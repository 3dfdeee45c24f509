#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import print_function

__author__ = "bibow"

from typing import Any, Dict, Optional

from .cache_utils import DEFAULT_CACHE_TTL, DynamoDBCacheStore, MemoryCacheStore
from .datasource import DynamoDBDataSource
from .decorators import log_error_decorator
from .handlers import (
    clear_iblock_cache,
    on_iblock_add,
    on_iblock_delete,
    on_iblock_update,
    register_invalidation_handlers,
)
from .iblock import CACHE_NAMESPACE, IblockFinder
from .model import BaseModel


class IblockFinderEngine(object):
    def __init__(self, logger, **setting):
        self.logger = logger
        self.setting = setting

        if (
            setting.get("region_name")
            and setting.get("aws_access_key_id")
            and setting.get("aws_secret_access_key")
        ):
            BaseModel.Meta.region = setting.get("region_name")
            BaseModel.Meta.aws_access_key_id = setting.get("aws_access_key_id")
            BaseModel.Meta.aws_secret_access_key = setting.get("aws_secret_access_key")

        self.cache_ttl = int(setting.get("cache_ttl", DEFAULT_CACHE_TTL))
        self.cache_namespace = setting.get("cache_namespace", CACHE_NAMESPACE)
        self.cache_store = setting.get("cache_store") or (
            DynamoDBCacheStore(logger)
            if setting.get("cache_backend") == "dynamodb"
            else MemoryCacheStore(logger)
        )
        self.data_source = setting.get("data_source") or DynamoDBDataSource(logger)

    @log_error_decorator
    def finder(
        self, filter: Optional[Dict[str, Any]], silent_mode: bool = False
    ) -> IblockFinder:
        return IblockFinder(filter, silent_mode, **self._finder_kwargs())

    @log_error_decorator
    def warm_cache(self, iblock_type: str, iblock_code: str) -> None:
        IblockFinder.warm_cache(iblock_type, iblock_code, **self._finder_kwargs())

    def on_iblock_delete(self, *args, **kwargs) -> int:
        return on_iblock_delete(self.cache_store, *args, logger=self.logger, **kwargs)

    def on_iblock_add(self, *args, **kwargs) -> int:
        return on_iblock_add(self.cache_store, *args, logger=self.logger, **kwargs)

    def on_iblock_update(self, *args, **kwargs) -> int:
        return on_iblock_update(self.cache_store, *args, logger=self.logger, **kwargs)

    def clear_iblock_cache(self, iblock_id) -> int:
        return clear_iblock_cache(self.cache_store, iblock_id, logger=self.logger)

    def register_handlers(self, event_bus) -> None:
        register_invalidation_handlers(event_bus, self.cache_store, logger=self.logger)

    def _finder_kwargs(self) -> Dict[str, Any]:
        return {
            "data_source": self.data_source,
            "cache_store": self.cache_store,
            "logger": self.logger,
            "cache_ttl": self.cache_ttl,
            "cache_namespace": self.cache_namespace,
        }
