#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
Data sources the finders read iblocks, properties and property
enumerations from.

Every source exposes ``list(collection, filter, select)``. A filter value is
either a scalar (equality) or a list/tuple/set (membership). Selecting
``property_code`` on the ``property_enum`` collection joins the code of the
owning property.
"""
from __future__ import print_function

__author__ = "bibow"

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .decorators import datastore_retry
from .exceptions import DependencyUnavailableError
from .models import IblockModel, PropertyEnumModel, PropertyModel

IBLOCK = "iblock"
PROPERTY = "property"
PROPERTY_ENUM = "property_enum"
COLLECTIONS = (IBLOCK, PROPERTY, PROPERTY_ENUM)

PROPERTY_CODE = "property_code"

Row = Dict[str, Any]


def _as_values(value: Any) -> Optional[List[Any]]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return None


def _matches(row: Row, filter: Optional[Dict[str, Any]]) -> bool:
    for key, expected in (filter or {}).items():
        values = _as_values(expected)
        if values is not None:
            if row.get(key) not in values:
                return False
        elif row.get(key) != expected:
            return False
    return True


class DataSource(ABC):
    @abstractmethod
    def is_available(self) -> bool:
        """Whether every collection the finders read can be queried."""

    @abstractmethod
    def list(
        self,
        collection: str,
        filter: Optional[Dict[str, Any]] = None,
        select: Optional[Sequence[str]] = None,
    ) -> List[Row]:
        pass


class MemoryDataSource(DataSource):
    """Rows held in memory, keyed by collection. ``calls`` records every read."""

    def __init__(
        self,
        rows: Optional[Dict[str, Iterable[Row]]] = None,
        available: bool = True,
    ):
        self.available = available
        self.calls: List[tuple] = []
        unknown = sorted(set(rows or {}) - set(COLLECTIONS))
        if unknown:
            raise DependencyUnavailableError(
                f"Unknown collection ({', '.join(unknown)})."
            )
        self._rows: Dict[str, List[Row]] = {
            collection: [dict(row) for row in (rows or {}).get(collection, [])]
            for collection in COLLECTIONS
        }

    def add(self, collection: str, **row: Any) -> None:
        self._get_rows(collection).append(row)

    def is_available(self) -> bool:
        return self.available

    def list(
        self,
        collection: str,
        filter: Optional[Dict[str, Any]] = None,
        select: Optional[Sequence[str]] = None,
    ) -> List[Row]:
        self.calls.append((collection, dict(filter or {}), tuple(select or ())))

        rows = [row for row in self._get_rows(collection) if _matches(row, filter)]
        if collection == PROPERTY_ENUM and select and PROPERTY_CODE in select:
            codes = {
                prop.get("id"): prop.get("code")
                for prop in self._get_rows(PROPERTY)
            }
            rows = [
                dict(row, **{PROPERTY_CODE: codes.get(row.get("property_id"))})
                for row in rows
            ]

        if not select:
            return [dict(row) for row in rows]
        return [{column: row.get(column) for column in select} for row in rows]

    def _get_rows(self, collection: str) -> List[Row]:
        if collection not in self._rows:
            raise DependencyUnavailableError(f"Unknown collection ({collection}).")
        return self._rows[collection]


class DynamoDBDataSource(DataSource):
    """
    Data source reading the pynamodb tables.

    Lookups by ``id`` go through ``batch_get``; lookups by the parent key of a
    collection go through its global secondary index; anything else is a
    scan.
    """

    MODELS = {
        IBLOCK: IblockModel,
        PROPERTY: PropertyModel,
        PROPERTY_ENUM: PropertyEnumModel,
    }
    INDEXES = {
        PROPERTY: ("iblock_id", "iblock_id_index"),
        PROPERTY_ENUM: ("property_id", "property_id_index"),
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._available: Optional[bool] = None

    def is_available(self) -> bool:
        if not self._available:
            self._available = all(model.exists() for model in self.MODELS.values())
            if not self._available:
                self.logger.warning("The iblock tables are not provisioned.")
        return self._available

    @datastore_retry
    def list(
        self,
        collection: str,
        filter: Optional[Dict[str, Any]] = None,
        select: Optional[Sequence[str]] = None,
    ) -> List[Row]:
        model = self.MODELS.get(collection)
        if model is None:
            raise DependencyUnavailableError(f"Unknown collection ({collection}).")

        filter = dict(filter or {})
        join = collection == PROPERTY_ENUM and bool(select) and PROPERTY_CODE in select
        attributes_to_get = None
        if select:
            attributes_to_get = model.model_attributes(
                list(select)
                + list(filter.keys())
                + (["property_id"] if join else [])
            )
            attributes_to_get = sorted(set(attributes_to_get))

        rows = [
            row
            for row in model.to_rows(
                self._fetch(model, collection, filter, attributes_to_get)
            )
            if _matches(row, filter)
        ]

        if join:
            codes = self._get_property_codes({row["property_id"] for row in rows})
            for row in rows:
                row[PROPERTY_CODE] = codes.get(row["property_id"])

        self.logger.debug("Fetched %s %s rows by %s", len(rows), collection, filter)
        if not select:
            return rows
        return [{column: row.get(column) for column in select} for row in rows]

    def _fetch(
        self,
        model: Any,
        collection: str,
        filter: Dict[str, Any],
        attributes_to_get: Optional[List[str]],
    ) -> Iterable[Any]:
        if "id" in filter:
            ids = _as_values(filter["id"]) or [filter["id"]]
            return model.batch_get(ids, attributes_to_get=attributes_to_get)

        if collection in self.INDEXES and self.INDEXES[collection][0] in filter:
            key, index_name = self.INDEXES[collection]
            index = getattr(model, index_name)
            keys = _as_values(filter[key]) or [filter[key]]
            return [
                entity
                for value in keys
                for entity in index.query(value, attributes_to_get=attributes_to_get)
            ]

        condition = None
        for key, expected in filter.items():
            attribute = getattr(model, key)
            values = _as_values(expected)
            clause = attribute.is_in(*values) if values is not None else attribute == expected
            condition = clause if condition is None else condition & clause
        return model.scan(condition, attributes_to_get=attributes_to_get)

    def _get_property_codes(self, property_ids: Iterable[Any]) -> Dict[Any, Any]:
        property_ids = [property_id for property_id in property_ids if property_id]
        if not property_ids:
            return {}
        return {
            prop.id: prop.code
            for prop in PropertyModel.batch_get(
                property_ids, attributes_to_get=["id", "code"]
            )
        }
