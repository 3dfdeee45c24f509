#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import print_function

from pynamodb.attributes import NumberAttribute, UnicodeAttribute
from pynamodb.indexes import AllProjection, GlobalSecondaryIndex

from ..model import BaseModel


class PropertyIdIndex(GlobalSecondaryIndex):
    class Meta:
        billing_mode = "PAY_PER_REQUEST"
        projection = AllProjection()
        index_name = "property_id-index"

    property_id = NumberAttribute(hash_key=True)


class PropertyEnumModel(BaseModel):
    class Meta(BaseModel.Meta):
        table_name = "bex-iblock-property-enums"

    id = NumberAttribute(hash_key=True)
    property_id = NumberAttribute()
    xml_id = UnicodeAttribute(null=True)
    property_id_index = PropertyIdIndex()
