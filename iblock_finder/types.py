#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
Lookup requests understood by the shard strategies.

Each request carries only the fields its lookup needs, so a strategy
dispatches on the request class instead of a string selector.
"""
from __future__ import print_function

__author__ = "bibow"

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class IdLookup:
    iblock_type: str
    code: str


@dataclass(frozen=True)
class TypeLookup:
    pass


@dataclass(frozen=True)
class CodeLookup:
    pass


@dataclass(frozen=True)
class PropIdLookup:
    prop_code: str


@dataclass(frozen=True)
class PropEnumIdLookup:
    prop_code: str
    value_xml_id: str


LookupRequest = Union[IdLookup, TypeLookup, CodeLookup, PropIdLookup, PropEnumIdLookup]
