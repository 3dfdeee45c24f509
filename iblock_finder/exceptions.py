#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import print_function

__author__ = "bibow"

from typing import Any, Optional


class IblockFinderError(Exception):
    """Base class of every error raised by the finders."""


class DependencyUnavailableError(IblockFinderError):
    """The data source or one of its required collections is not available."""


class InvalidFilterError(IblockFinderError):
    def __init__(self, key: Optional[str] = None, message: Optional[str] = None):
        self.key = key
        if message is None:
            message = (
                f"Invalid value of the filter key ({key})."
                if key
                else "Invalid filter."
            )
        super().__init__(message)


class ValueNotFoundError(IblockFinderError):
    def __init__(self, subject: str, condition: Any):
        self.subject = subject
        self.condition = condition
        super().__init__(f"{subject} not found by {condition}.")
