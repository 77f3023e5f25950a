"""
Helpers shared by the SQLAlchemy-backed stores.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import wraps
from typing import Any, Callable, Optional, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError

from engine.exceptions import StoreUnavailable
from engine.models import as_utc

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)


def translate_errors(func: F) -> F:
    """Re-raise database driver failures as StoreUnavailable; domain errors pass through."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as exc:
            log.warning("%s failed: %s", func.__qualname__, exc)
            raise StoreUnavailable(f"{func.__qualname__}: {exc.__class__.__name__}") from exc
        except RuntimeError as exc:
            # raised by get_db_session before init_database
            raise StoreUnavailable(str(exc)) from exc

    return cast(F, wrapper)


def utc_or_none(ts: Optional[datetime]) -> Optional[datetime]:
    return as_utc(ts) if ts is not None else None
