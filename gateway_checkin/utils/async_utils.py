"""Async helpers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, TypeVar

from gateway_checkin.utils.errors import StorageFailureError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_timeout(
    awaitable: Awaitable[T],
    timeout: float,
    *,
    operation: str = "operation",
) -> T:
    """Await with an upper bound, mapping expiry to a storage failure.

    Args:
        awaitable: Coroutine to run
        timeout: Seconds before giving up
        operation: Name used in the log line and diagnostic

    Raises:
        StorageFailureError: When the timeout expires
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"{operation} timed out after {timeout}s")
        raise StorageFailureError(f"{operation} timed out")


def summarize_exception(exc: BaseException, limit: int = 80) -> str:
    """Short diagnostic suffix safe to show to callers."""
    text: Any = getattr(exc, "orig", None) or exc
    summary = f"{type(exc).__name__}: {text}".splitlines()[0]
    if len(summary) > limit:
        summary = summary[: limit - 3] + "..."
    return summary
