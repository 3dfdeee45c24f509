#!/usr/bin/python
# -*- coding: utf-8 -*-
from pynamodb.exceptions import DoesNotExist

from .cache_entry import CacheEntryModel
from .iblock import IblockModel
from .property import PropertyModel
from .property_enum import PropertyEnumModel

__all__ = [
    "DoesNotExist",
    "CacheEntryModel",
    "IblockModel",
    "PropertyModel",
    "PropertyEnumModel",
]
