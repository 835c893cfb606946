"""Optimistic mutation: apply a change locally, confirm it remotely, undo on failure."""
import logging
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def optimistic_mutation(
    read: Callable[[], T],
    apply: Callable[[T], None],
    commit: Callable[[], Awaitable[R]],
    rollback: Callable[[T], None],
    on_success: Optional[Callable[[R], None]] = None,
) -> R:
    """Run ``commit`` with the local state already updated.

    ``read`` captures the value before the change, ``apply`` makes the local
    change visible right away, and ``rollback`` restores the captured value if
    ``commit`` raises. The error is re-raised after the rollback; nothing is
    retried.
    """
    previous = read()
    apply(previous)
    try:
        result = await commit()
    except Exception:
        rollback(previous)
        logger.info("Optimistic update rolled back")
        raise
    if on_success is not None:
        on_success(result)
    return result
