#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import print_function

from pynamodb.attributes import TTLAttribute, UnicodeAttribute, UnicodeSetAttribute

from ..model import BaseModel


class CacheEntryModel(BaseModel):
    class Meta(BaseModel.Meta):
        table_name = "bex-finder-cache"

    cache_key = UnicodeAttribute(hash_key=True)
    value = UnicodeAttribute()
    tags = UnicodeSetAttribute(null=True)
    expires_at = TTLAttribute(null=True)
