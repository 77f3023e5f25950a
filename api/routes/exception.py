"""
Centralized exception handling decorator for API route functions.

The :func:`handle_exceptions` decorator wraps an endpoint handler and converts
domain errors into :class:`fastapi.HTTPException` responses:

* ``NotFoundError`` -> 404
* ``ValidationError`` -> 422
* ``InvalidTransition`` -> 409
* ``UpstreamError`` -> 502
* ``StoreUnavailable`` -> 503
* anything else -> 500

HTTPExceptions raised by the handler are propagated untouched.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import inspect
import logging
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from fastapi import HTTPException

from engine.exceptions import (
    InvalidTransition,
    NotFoundError,
    StoreUnavailable,
    UpstreamError,
    ValidationError,
)

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)

STATUS_BY_ERROR: tuple[tuple[type[Exception], int], ...] = (
    (NotFoundError, 404),
    (ValidationError, 422),
    (InvalidTransition, 409),
    (UpstreamError, 502),
    (StoreUnavailable, 503),
)


def to_http(exc: Exception) -> HTTPException:
    for err_type, status in STATUS_BY_ERROR:
        if isinstance(exc, err_type):
            return HTTPException(status_code=status, detail=str(exc))
    log.exception("Unhandled error in route", exc_info=exc)
    return HTTPException(status_code=500, detail=str(exc))


def handle_exceptions(func: F) -> F:
    if inspect.iscoroutinefunction(func):
        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as exc:
                raise to_http(exc) from exc

        return cast(F, async_wrapper)

    @wraps(func)
    def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except HTTPException:
            raise
        except Exception as exc:
            raise to_http(exc) from exc

    return cast(F, sync_wrapper)
