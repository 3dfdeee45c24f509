#!/usr/bin/python
# -*- coding: utf-8 -*-
from __future__ import print_function

__author__ = "bibow"

import functools
import inspect
import logging
import time
import traceback

from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import IblockFinderError
from .models import DoesNotExist


def _get_logger(original_function, args, kwargs):
    parameter_names = list(inspect.signature(original_function).parameters.keys())

    if "logger" in kwargs:
        return kwargs["logger"]
    if parameter_names and parameter_names[0] == "self" and args:
        return getattr(args[0], "logger", None) or logging.getLogger(
            original_function.__module__
        )
    if "logger" in parameter_names and parameter_names.index("logger") < len(args):
        return args[parameter_names.index("logger")]
    return logging.getLogger(original_function.__module__)


def monitor_decorator(original_function):
    @functools.wraps(original_function)
    def wrapper_function(*args, **kwargs):
        logger = _get_logger(original_function, args, kwargs)

        start = time.perf_counter()
        result = original_function(*args, **kwargs)
        logger.info(
            f"Execute function: {original_function.__name__} spent {time.perf_counter() - start}s!"
        )
        return result

    return wrapper_function


def log_error_decorator(original_function):
    @functools.wraps(original_function)
    def wrapper_function(*args, **kwargs):
        try:
            return original_function(*args, **kwargs)
        except Exception as e:
            log = traceback.format_exc()
            _get_logger(original_function, args, kwargs).error(log)
            raise e

    return wrapper_function


## Transient datastore faults only; lookups that legitimately fail are final.
datastore_retry = retry(
    reraise=True,
    retry=retry_if_not_exception_type((IblockFinderError, DoesNotExist)),
    wait=wait_exponential(multiplier=1, max=60),
    stop=stop_after_attempt(5),
)
