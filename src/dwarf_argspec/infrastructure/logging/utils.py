#!/usr/bin/env python3

"""Logger lookup and the timing decorator used around expensive operations."""

import logging
from collections.abc import Callable
from functools import wraps
from time import perf_counter
from typing import Any, TypeVar, cast

F = TypeVar("F", bound=Callable[..., Any])


def get_logger(name: str) -> logging.Logger:
    """Module logger; handlers are installed by LoggerSetup only."""
    return logging.getLogger(name)


def log_timing(*expected: type[BaseException]) -> Callable[[F], F]:
    """
    Decorator factory logging the duration of a call at debug level.

    Exceptions listed in ``expected`` are outcomes the caller handles (a
    binary without DWARF, a missing file) and are logged at debug before
    being re-raised. Anything else is logged at error.

    Args:
        *expected: Exception types that are part of normal operation

    Returns:
        Decorator wrapping a function with timing logs

    Example:
        @log_timing(DebugInfoOpenError)
        def open(self): ...
    """

    def decorator(func: F) -> F:
        logger = get_logger(func.__module__)
        func_name = func.__qualname__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            start = perf_counter()
            try:
                result = func(*args, **kwargs)
            except expected as e:
                elapsed_ms = (perf_counter() - start) * 1000
                logger.debug(f"{func_name} gave up after {elapsed_ms:.1f} ms: {e}")
                raise
            except Exception as e:
                elapsed_ms = (perf_counter() - start) * 1000
                logger.error(
                    f"{func_name} raised {type(e).__name__} after {elapsed_ms:.1f} ms: {e}"
                )
                raise

            logger.debug(f"{func_name} took {(perf_counter() - start) * 1000:.1f} ms")
            return result

        return cast("F", wrapper)

    return decorator
