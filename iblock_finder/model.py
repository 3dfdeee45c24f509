#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
Base model class for the DynamoDB tables read by the finders.

Example:
    >>> from iblock_finder.model import BaseModel
    >>>
    >>> class MyModel(BaseModel):
    ...     class Meta(BaseModel.Meta):
    ...         table_name = 'my_table'
    ...     id = NumberAttribute(hash_key=True)
    ...     code = UnicodeAttribute(null=True)
    >>>
    >>> rows = MyModel.to_rows(MyModel.scan(), ["id", "code"])
"""

from __future__ import print_function

__author__ = "bibow"

import logging
import os
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type, TypeVar

from pynamodb.models import Model

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="BaseModel")


class BaseModel(Model):
    """
    Base model class for DynamoDB models.

    This class extends Pynamodb's Model class with custom Meta configuration
    and helpers to turn model instances into plain row mappings.
    """

    class Meta:
        region: Optional[str] = (
            os.getenv("REGION_NAME")
            or os.getenv("REGIONNAME")
            or os.getenv("region_name")
        )
        billing_mode: str = "PAY_PER_REQUEST"
        connect_timeout_seconds = float(os.getenv("CONNECT_TIMEOUT_SECONDS", 10))
        read_timeout_seconds = float(os.getenv("READ_TIMEOUT_SECONDS", 30))
        max_retry_attempts = int(os.getenv("MAX_RETRY_ATTEMPTS", 3))

    @classmethod
    def to_row(
        cls: Type[T],
        entity: "BaseModel",
        select: Optional[Sequence[str]] = None,
    ) -> Dict[str, Any]:
        """
        Convert a model instance into a row mapping.

        Args:
            entity: The model instance
            select: Attribute names to keep (all attributes when omitted)

        Returns:
            A dictionary keyed by attribute name; unset attributes map to None
        """
        names = list(select) if select else list(cls.get_attributes().keys())
        return {name: getattr(entity, name, None) for name in names}

    @classmethod
    def to_rows(
        cls: Type[T],
        entities: Iterable["BaseModel"],
        select: Optional[Sequence[str]] = None,
    ) -> List[Dict[str, Any]]:
        return [cls.to_row(entity, select) for entity in entities]

    @classmethod
    def model_attributes(cls: Type[T], select: Optional[Sequence[str]]) -> Optional[List[str]]:
        """Keep only the names of ``select`` that are attributes of the model."""
        if not select:
            return None
        attributes = cls.get_attributes()
        return [name for name in select if name in attributes]
