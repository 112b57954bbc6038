"""Shared utilities for container operations.

This module contains small helpers used by both runtime clients.
"""

import asyncio
import functools


def short_id(container_id: str) -> str:
    """Shorten a container ID for log output."""
    return (container_id or "")[:12]


async def run_in_executor(func, *args, **kwargs):
    """
    Run a blocking function in the default thread pool executor.

    Args:
        func: Blocking function to run
        *args: Arguments to pass to the function
        **kwargs: Keyword arguments to pass to the function

    Returns:
        Result of the function
    """
    loop = asyncio.get_event_loop()
    if kwargs:
        func = functools.partial(func, **kwargs)
    return await loop.run_in_executor(None, func, *args)
