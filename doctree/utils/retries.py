"""
Retry decorator for transient provider faults.
"""
import logging
import random
import time
from functools import wraps
from typing import Any, Callable, Tuple, Type, TypeVar

from ..config import QUERY_RETRIES, RETRY_BACKOFF_FACTOR
from ..errors import ProviderUnavailable

T = TypeVar('T')

logger = logging.getLogger(__name__)


def with_retry(
    max_retries: int = QUERY_RETRIES,
    backoff_factor: float = RETRY_BACKOFF_FACTOR,
    exceptions: Tuple[Type[BaseException], ...] = (ProviderUnavailable,)
) -> Callable:
    """
    Decorator retrying a call with exponential backoff.

    Only ``exceptions`` trigger a retry; anything else propagates at once.
    After the last attempt the final exception is re-raised.

    Args:
        max_retries: Retries after the first attempt
        backoff_factor: Base of the exponential delay
        exceptions: Exception types worth retrying

    Returns:
        Decorated function with retry logic
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        func_name = getattr(func, '__name__', 'function')

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    attempt += 1
                    if attempt > max_retries:
                        logger.error(f"Giving up on {func_name} after {max_retries} retries")
                        raise

                    # Backoff with jitter
                    delay = backoff_factor ** attempt + random.uniform(0, 1)
                    logger.warning(
                        f"Attempt {attempt}/{max_retries} failed for {func_name}: "
                        f"{e.__class__.__name__}: {e}. Retrying in {delay:.2f}s"
                    )
                    time.sleep(delay)

        return wrapper
    return decorator
