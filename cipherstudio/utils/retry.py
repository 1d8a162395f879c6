"""Retry with exponential backoff for persistence calls"""
import asyncio
import logging
from functools import wraps
from typing import Callable, Any, Type

logger = logging.getLogger(__name__)


def retry_async(
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 10.0,
    exponential_base: float = 2.0,
    exceptions: tuple[Type[Exception], ...] = (Exception,),
    log_prefix: str = "",
) -> Callable:
    """
    Retry decorator for async functions with exponential backoff.

    Only the listed exceptions trigger another attempt; anything else and the
    last failure propagate unchanged.

    Args:
        max_attempts: Total attempts including the first one (1 disables retry)
        initial_delay: Delay in seconds before the second attempt
        max_delay: Upper bound for the delay between attempts
        exponential_base: Delay multiplier after every failed attempt
        exceptions: Exceptions that trigger a retry
        log_prefix: Prefix for log messages

    Example:
        save = retry_async(max_attempts=3, exceptions=(SyncError,))(engine.save)
        project = await save(ctx, project)
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempt = 0
            delay = initial_delay

            while True:
                attempt += 1
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= max_attempts:
                        if max_attempts > 1:
                            logger.error(
                                f"{log_prefix}[Retry] Giving up on {func.__name__} after {attempt} attempts: "
                                f"{type(e).__name__}: {e}"
                            )
                        raise

                    logger.warning(
                        f"{log_prefix}[Retry] Attempt {attempt}/{max_attempts} of {func.__name__} failed: "
                        f"{type(e).__name__}: {e}. Retrying in {delay:.1f}s..."
                    )

                    await asyncio.sleep(delay)
                    delay = min(delay * exponential_base, max_delay)

        return wrapper

    return decorator
