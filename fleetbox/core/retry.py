"""Retry decorator for operations that fail transiently."""
import functools
import logging
import time
from typing import Tuple, Type

from fleetbox.core.logger import get_logger

logger = get_logger(__name__)


def retry(
    max_attempts: int = 3,
    delay: float = 2.0,
    backoff: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
    quiet: bool = False,
):
    """Retry decorator with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts
        delay: Initial delay in seconds between attempts
        backoff: Backoff multiplier for each retry (1.0 keeps the delay fixed)
        exceptions: Tuple of exception types to catch and retry
        quiet: Log intermediate failures at debug level instead of warning

    The last exception is re-raised once the attempts are exhausted.

    Example:
        @retry(max_attempts=3, delay=1, exceptions=(BackendError,))
        def pull(image):
            ...
    """
    level = logging.DEBUG if quiet else logging.WARNING

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            current_delay = delay

            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_attempts:
                        logger.log(
                            level,
                            f"{func.__name__} failed after {max_attempts} attempts: {e}",
                        )
                        raise

                    logger.log(
                        level,
                        f"{func.__name__} failed (attempt {attempt}/{max_attempts}): {e}",
                    )
                    time.sleep(current_delay)
                    current_delay *= backoff

            return None

        return wrapper

    return decorator
