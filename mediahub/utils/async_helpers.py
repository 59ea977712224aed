"""Async utility functions for calling blocking code from the event loop."""

import asyncio
import functools


def sync_to_async(func):
    """
    Decorator to convert a sync function to an async function.

    The wrapped call runs in the default executor, so blocking file I/O does
    not stall other requests.

    Args:
        func: Sync function to convert

    Returns:
        Async version of the function
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

    return wrapper
