import functools
import time

from .logger import logger


def time_it(func):
    """Log how long a coroutine took, at debug level."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return await func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.debug(f"⏱️ {func.__qualname__} took {elapsed_ms:.1f} ms")

    return wrapper
