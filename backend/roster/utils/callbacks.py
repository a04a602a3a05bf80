import inspect
from typing import Callable


async def emit(callback: Callable, *args):
    """Invoke a listener that may be a plain function or a coroutine function."""
    result = callback(*args)
    if inspect.isawaitable(result):
        await result
