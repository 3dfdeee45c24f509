#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import print_function

from pynamodb.attributes import NumberAttribute, UnicodeAttribute
from pynamodb.indexes import AllProjection, GlobalSecondaryIndex

from ..model import BaseModel


class IblockIdIndex(GlobalSecondaryIndex):
    class Meta:
        billing_mode = "PAY_PER_REQUEST"
        projection = AllProjection()
        index_name = "iblock_id-index"

    iblock_id = NumberAttribute(hash_key=True)


class PropertyModel(BaseModel):
    class Meta(BaseModel.Meta):
        table_name = "bex-iblock-properties"

    id = NumberAttribute(hash_key=True)
    iblock_id = NumberAttribute()
    code = UnicodeAttribute(null=True)
    iblock_id_index = IblockIdIndex()
