"""Helpers for running independent I/O side by side."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable


async def gather_settled(*aws: Awaitable[Any]) -> list[Any]:
    """Await every awaitable, then raise the first failure if any.

    Unlike a plain ``asyncio.gather`` this never returns while a sibling is
    still running, so a threadpool call cannot outlive the session it uses.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return list(results)
