"""
Async helpers for running independent branches side by side.
"""

import asyncio
import logging
from typing import Any, Awaitable, List, Optional, Sequence

logger = logging.getLogger(__name__)


async def gather_settled(
    aws: Sequence[Awaitable[Any]],
    defaults: Sequence[Any],
    names: Optional[Sequence[str]] = None,
) -> List[Any]:
    """Await all of ``aws`` concurrently; a branch that raises gets its default.

    Every branch settles before this returns, so one failing branch never
    cancels or discards the others.

    Args:
        aws: Awaitables to run concurrently
        defaults: Value substituted for each awaitable that raises
        names: Optional labels used in log messages

    Returns:
        Results in the same order as ``aws``
    """
    if len(defaults) != len(aws):
        raise ValueError("gather_settled needs one default per awaitable")

    results = await asyncio.gather(*aws, return_exceptions=True)
    settled = []
    for i, result in enumerate(results):
        if isinstance(result, Exception):
            label = names[i] if names else f"branch {i}"
            logger.warning(f"{label} failed, using default: {result!r}")
            settled.append(defaults[i])
        elif isinstance(result, BaseException):
            raise result
        else:
            settled.append(result)
    return settled
