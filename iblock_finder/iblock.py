# -*- coding: utf-8 -*-
"""
Finder of info blocks ("iblocks"), their properties and the enumerated
values of those properties.

Two shards are cached:

* the lite shard maps ``type -> code -> id`` for every iblock and is only
  read to resolve the id of a finder built from a type and a code;
* one iblock shard per id holds the whole metadata tree of that iblock::

    {
        "type": "news",
        "code": "press",
        "props_id": {"TITLE": 42},
        "props_enum_id": {"COLOR": {"red": 301}},
    }

Example:
    >>> finder = IblockFinder(
    ...     {"type": "news", "code": "press"},
    ...     data_source=data_source,
    ...     cache_store=cache_store,
    ... )
    >>> finder.id(), finder.prop_id("TITLE")
    (7, 42)
"""
from __future__ import annotations

__author__ = "bibow"

import logging
from typing import Any, Dict, Optional, Set

from .cache_utils import DEFAULT_CACHE_TTL, CacheStore
from .datasource import IBLOCK, PROPERTY, PROPERTY_CODE, PROPERTY_ENUM, DataSource
from .exceptions import DependencyUnavailableError, InvalidFilterError, ValueNotFoundError
from .finder import Finder, ShardCache, ShardStrategy
from .types import (
    CodeLookup,
    IdLookup,
    LookupRequest,
    PropEnumIdLookup,
    PropIdLookup,
    TypeLookup,
)

CACHE_SHARD_LITE = "lite"
CACHE_NAMESPACE = "iblock_finder/iblocks"
COLLECTION_TAG = "iblock"
NEW_IBLOCK_TAG = "iblock_id_new"


def iblock_tag(iblock_id: Any) -> str:
    return f"iblock_id_{iblock_id}"


def _by_id(row: Dict[str, Any]) -> int:
    return int(row["id"])


class IblockShardStrategy(ShardStrategy):
    name = "iblock"

    def __init__(self, data_source: DataSource):
        self.data_source = data_source

    def build_shard(self, shard: Any) -> Dict[str, Any]:
        if shard == CACHE_SHARD_LITE:
            return self._build_lite_shard()
        return self._build_iblock_shard(shard)

    def resolve(self, structure: Dict[str, Any], request: LookupRequest, shard: Any) -> Any:
        if shard == CACHE_SHARD_LITE:
            return self._resolve_lite_shard(structure, request)
        return self._resolve_iblock_shard(structure, request, shard)

    def shard_tags(self, shard: Any, structure: Dict[str, Any]) -> Set[str]:
        if shard == CACHE_SHARD_LITE:
            tags = {
                iblock_tag(iblock_id)
                for codes in structure.values()
                for iblock_id in codes.values()
            }
            tags.add(NEW_IBLOCK_TAG)
            return tags
        return {iblock_tag(shard)}

    def _build_lite_shard(self) -> Dict[str, Dict[str, int]]:
        items: Dict[str, Dict[str, int]] = {}
        rows = self.data_source.list(IBLOCK, select=["iblock_type_id", "id", "code"])

        for iblock in sorted(rows, key=_by_id):
            if iblock.get("code"):
                items.setdefault(iblock["iblock_type_id"], {})[iblock["code"]] = int(
                    iblock["id"]
                )
        return items

    def _build_iblock_shard(self, iblock_id: int) -> Dict[str, Any]:
        rows = self.data_source.list(
            IBLOCK, filter={"id": iblock_id}, select=["iblock_type_id", "code"]
        )
        if not rows:
            raise ValueNotFoundError("Iblock", f"ID #{iblock_id}")

        iblock = rows[0]
        items: Dict[str, Any] = {
            "type": iblock.get("iblock_type_id") or "",
            "code": iblock.get("code") or "",
            "props_id": {},
            "props_enum_id": {},
        }

        props = sorted(
            self.data_source.list(
                PROPERTY,
                filter={"iblock_id": iblock_id},
                select=["id", "code", "iblock_id"],
            ),
            key=_by_id,
        )
        for prop in props:
            if prop.get("code"):
                items["props_id"][prop["code"]] = int(prop["id"])

        if props:
            enums = self.data_source.list(
                PROPERTY_ENUM,
                filter={"property_id": [prop["id"] for prop in props]},
                select=["id", "xml_id", "property_id", PROPERTY_CODE],
            )
            for enum in sorted(enums, key=_by_id):
                if enum.get(PROPERTY_CODE) and enum.get("xml_id"):
                    items["props_enum_id"].setdefault(enum[PROPERTY_CODE], {})[
                        str(enum["xml_id"])
                    ] = int(enum["id"])

        return items

    def _resolve_lite_shard(
        self, structure: Dict[str, Dict[str, int]], request: LookupRequest
    ) -> int:
        if not isinstance(request, IdLookup):
            raise InvalidFilterError(
                "type", f"Unsupported lookup on the lite shard ({request})."
            )

        value = int(structure.get(request.iblock_type, {}).get(request.code) or 0)
        if value <= 0:
            raise ValueNotFoundError(
                "Iblock ID", f'type "{request.iblock_type}" and code "{request.code}"'
            )
        return value

    def _resolve_iblock_shard(
        self, structure: Dict[str, Any], request: LookupRequest, iblock_id: Any
    ) -> Any:
        if isinstance(request, TypeLookup):
            value = str(structure.get("type") or "")
            if not value:
                raise ValueNotFoundError("Iblock type", f"iblock #{iblock_id}")
            return value

        if isinstance(request, CodeLookup):
            value = str(structure.get("code") or "")
            if not value:
                raise ValueNotFoundError("Iblock code", f"iblock #{iblock_id}")
            return value

        if isinstance(request, PropIdLookup):
            value = int(structure.get("props_id", {}).get(request.prop_code) or 0)
            if value <= 0:
                raise ValueNotFoundError(
                    "Property ID",
                    f'iblock #{iblock_id} and property code "{request.prop_code}"',
                )
            return value

        if isinstance(request, PropEnumIdLookup):
            value = int(
                structure.get("props_enum_id", {})
                .get(request.prop_code, {})
                .get(str(request.value_xml_id))
                or 0
            )
            if value <= 0:
                raise ValueNotFoundError(
                    "Property enum ID",
                    f'iblock #{iblock_id}, property code "{request.prop_code}" '
                    f'and property XML ID "{request.value_xml_id}"',
                )
            return value

        raise InvalidFilterError(
            "type", f"Unsupported lookup on the iblock shard ({request})."
        )


class IblockFinder(Finder):
    """
    Finder of an iblock by ``{"id": ...}`` or ``{"type": ..., "code": ...}``.

    The id is resolved once, in the constructor. Everything else is read from
    the iblock shard on every call.

    When built with ``silent_mode=True`` from an invalid filter, the finder is
    unresolved and every accessor returns None without reading the cache or
    the data source.
    """

    int_filter_keys = ("id", "prop_id")
    str_filter_keys = ("type", "code")

    def __init__(
        self,
        filter: Optional[Dict[str, Any]],
        silent_mode: bool = False,
        *,
        data_source: DataSource,
        cache_store: CacheStore,
        logger: Optional[logging.Logger] = None,
        cache_ttl: int = DEFAULT_CACHE_TTL,
        cache_namespace: str = CACHE_NAMESPACE,
    ):
        if data_source is None or not data_source.is_available():
            raise DependencyUnavailableError('Failed include module "iblock"')

        super().__init__(filter, silent_mode, logger=logger)

        self.cache = ShardCache(
            IblockShardStrategy(data_source),
            cache_store,
            logger=self.logger,
            ttl=cache_ttl,
            collection_tag=COLLECTION_TAG,
            namespace=cache_namespace,
        )
        self._id: Optional[int] = None
        self._type: Optional[str] = None
        self._code: Optional[str] = None

        if not self.is_resolved:
            return

        self._type = self.filter.get("type")
        self._code = self.filter.get("code")

        if "id" in self.filter:
            self._id = self.filter["id"]
        else:
            self._id = self.cache.get(
                IdLookup(iblock_type=self._type, code=self._code), CACHE_SHARD_LITE
            )

    def id(self) -> Optional[int]:
        return self._id

    def type(self) -> Optional[str]:
        return self._get(TypeLookup())

    def code(self) -> Optional[str]:
        return self._get(CodeLookup())

    def prop_id(self, code: str) -> Optional[int]:
        """Gets the ID of the property ``code`` of the iblock."""
        return self._get(PropIdLookup(prop_code=code))

    def prop_enum_id(self, code: str, value_xml_id: str) -> Optional[int]:
        """Gets the ID of the enum value ``value_xml_id`` of the property ``code``."""
        return self._get(PropEnumIdLookup(prop_code=code, value_xml_id=value_xml_id))

    attribute_id = prop_id
    attribute_enum_id = prop_enum_id

    @classmethod
    def warm_cache(cls, iblock_type: str, iblock_code: str, **kwargs: Any) -> None:
        """Builds the lite shard and the iblock shard ahead of the first lookup."""
        finder = cls({"type": iblock_type, "code": iblock_code}, **kwargs)
        finder.code()

    def _get(self, request: LookupRequest) -> Any:
        if self._id is None:
            return None
        return self.cache.get(request, self._id)
