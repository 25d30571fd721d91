"""
Live/demo dispatch for storage operations.

Every storage method has the same shape: in demo mode compute the answer
from in-memory data; in live mode run the query and apply one of three
failure policies:

- reads fall back to the demo computation (never surface the error)
- creates and updates log and re-raise
- deletes, toggles and the health probe log and return a negative result
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ummah_api.core.observability import metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def read_with_fallback(
    demo_mode: bool,
    operation: str,
    live: Callable[[], Awaitable[T]],
    demo: Callable[[], T],
) -> T:
    """Run `live`; on any failure log it and answer from `demo` instead."""
    if demo_mode:
        return demo()
    try:
        return await live()
    except Exception as e:
        logger.error(
            f"Database error in {operation}, serving demo data: {e}",
            extra={"operation": operation},
            exc_info=True,
        )
        metrics.storage_fallbacks_total.labels(operation=operation).inc()
        return demo()


async def write_or_raise(
    demo_mode: bool,
    operation: str,
    live: Callable[[], Awaitable[T]],
    demo: Callable[[], T],
) -> T:
    """Run `live`; failures are logged and propagated to the caller."""
    if demo_mode:
        return demo()
    try:
        return await live()
    except Exception as e:
        logger.error(
            f"Database error in {operation}: {e}",
            extra={"operation": operation},
            exc_info=True,
        )
        metrics.storage_failures_total.labels(operation=operation, policy="raise").inc()
        raise


async def attempt_or_default(
    demo_mode: bool,
    operation: str,
    live: Callable[[], Awaitable[T]],
    demo: Callable[[], T],
    failed: T,
) -> T:
    """Run `live`; failures are logged and reported as `failed`."""
    if demo_mode:
        return demo()
    try:
        return await live()
    except Exception as e:
        logger.error(
            f"Database error in {operation}: {e}",
            extra={"operation": operation},
            exc_info=True,
        )
        metrics.storage_failures_total.labels(operation=operation, policy="degrade").inc()
        return failed
