"""Retrying a whole unit of work after a deadlock or serialization failure."""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

import structlog

from shared.errors import Conflict, TransientStorageError

logger = structlog.get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def retry_transient(max_attempts: int = 3, backoff: float = 0.05) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Re-run the decorated function when storage reports a transient failure.

    Only apply it to functions that open and commit their own transaction:
    a retry starts from scratch. ``max_attempts`` may be overridden per call
    with a ``max_attempts=`` keyword argument.
    """

    def deco(fn: Callable[P, R]) -> Callable[P, R]:
        @wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            attempts = kwargs.pop("max_attempts", None)
            if attempts is None:
                attempts = max_attempts
            if attempts < 1:
                raise ValueError(f"max_attempts must be at least 1, got {attempts}")
            attempt = 0
            while True:
                attempt += 1
                try:
                    return fn(*args, **kwargs)
                except TransientStorageError as exc:
                    if attempt >= attempts:
                        logger.warning("transient_failure_exhausted", operation=fn.__name__, attempts=attempt)
                        raise Conflict(
                            "Concurrent update conflict, please retry",
                            {"attempts": attempt},
                        ) from exc
                    logger.info("transient_failure_retry", operation=fn.__name__, attempt=attempt, error=str(exc))
                    time.sleep(backoff * attempt)

        return wrapper

    return deco
