"""
This module provides the few async primitives that we need on top of
asyncio. Currently only supporting asyncio.
"""

import asyncio


async def run_in_thread(func, *args):
    """ Run a blocking function in the default thread pool executor, and
    return its result.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


async def wait_for_all_or_cancel_the_rest(*coroutines):
    """ Wait for all of the given coroutines to complete, returning a list
    of their results (in order). If any of them fails, the others are
    cancelled (and awaited), and the error of the first failed coroutine
    in argument order is raised.
    """
    tasks = [asyncio.ensure_future(co) for co in coroutines]
    if not tasks:
        return []
    try:
        _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        # Our caller is cancelled (e.g. a sibling failed), take children down too
        for task in tasks:
            task.cancel()
        await _wait_and_retrieve_errors(tasks)
        raise
    for task in pending:
        task.cancel()
    errors = await _wait_and_retrieve_errors(tasks)
    if errors:
        raise errors[0]
    return [task.result() for task in tasks]


async def _wait_and_retrieve_errors(tasks):
    # Retrieve all errors, so that asyncio does not complain about them
    await asyncio.wait(tasks)
    return [
        task.exception()
        for task in tasks
        if not task.cancelled() and task.exception() is not None
    ]
