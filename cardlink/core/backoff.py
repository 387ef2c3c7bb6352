"""Retry delay utilities.

`fixed_delay_attempts` yields the attempt number for the caller to try an
operation, then sleeps for the fixed delay before the next attempt. The
delay does not grow between attempts and no sleep happens after the last one.
"""
from __future__ import annotations

import asyncio
from typing import AsyncIterator, Awaitable, Callable


async def fixed_delay_attempts(
    delay: float,
    max_attempts: int,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncIterator[int]:
    for attempt in range(1, max_attempts + 1):
        yield attempt
        if attempt < max_attempts and delay > 0:
            await sleep(delay)
