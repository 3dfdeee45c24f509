#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import print_function

from pynamodb.attributes import NumberAttribute, UnicodeAttribute

from ..model import BaseModel


class IblockModel(BaseModel):
    class Meta(BaseModel.Meta):
        table_name = "bex-iblocks"

    id = NumberAttribute(hash_key=True)
    iblock_type_id = UnicodeAttribute()
    code = UnicodeAttribute(null=True)
