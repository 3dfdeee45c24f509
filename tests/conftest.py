"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import logging

import pytest

from iblock_finder.cache_utils import MemoryCacheStore
from iblock_finder.datasource import IBLOCK, PROPERTY, PROPERTY_ENUM, MemoryDataSource
from iblock_finder.iblock import IblockFinder

# ============================================================
# Seed data
# ============================================================

IBLOCK_ROWS = [
    {"id": 7, "iblock_type_id": "news", "code": "press"},
    {"id": 8, "iblock_type_id": "news", "code": ""},
    {"id": 9, "iblock_type_id": "catalog", "code": "goods"},
]

PROPERTY_ROWS = [
    {"id": 42, "iblock_id": 7, "code": "TITLE"},
    {"id": 43, "iblock_id": 7, "code": ""},
    {"id": 44, "iblock_id": 7, "code": "COLOR"},
    {"id": 50, "iblock_id": 9, "code": "PRICE"},
]

PROPERTY_ENUM_ROWS = [
    {"id": 301, "property_id": 44, "xml_id": "red"},
    {"id": 302, "property_id": 44, "xml_id": "blue"},
    {"id": 303, "property_id": 43, "xml_id": "orphan"},
]


@pytest.fixture
def logger():
    return logging.getLogger("iblock_finder.tests")


@pytest.fixture
def data_source():
    """Memory data source seeded with the news/press iblock and its properties."""
    return MemoryDataSource(
        {
            IBLOCK: IBLOCK_ROWS,
            PROPERTY: PROPERTY_ROWS,
            PROPERTY_ENUM: PROPERTY_ENUM_ROWS,
        }
    )


@pytest.fixture
def cache_store(logger):
    return MemoryCacheStore(logger)


@pytest.fixture
def make_finder(data_source, cache_store, logger):
    """Build finders sharing the seeded data source and the cache store."""

    def _make_finder(filter, silent_mode=False):
        return IblockFinder(
            filter,
            silent_mode,
            data_source=data_source,
            cache_store=cache_store,
            logger=logger,
        )

    return _make_finder


def fetches(data_source, collection=None):
    """Number of reads issued against the data source."""
    return len(
        [call for call in data_source.calls if collection in (None, call[0])]
    )
