import asyncio
from functools import wraps

import structlog

logger = structlog.get_logger(__name__)

def async_retry(attempts=3, backoff_factor=0.5, exceptions=(Exception,)):
    """
    Retries an idempotent coroutine on ``exceptions``, sleeping
    ``backoff_factor * 2 ** n`` seconds between attempts. Anything else
    propagates immediately; the last failure is re-raised.
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            attempt = 1
            while True:
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt >= attempts:
                        logger.error(
                            "retries_exhausted",
                            function=func.__name__,
                            attempts=attempts,
                            error_type=type(e).__name__,
                            error_message=str(e),
                            exc_info=True,
                        )
                        raise
                    delay = backoff_factor * (2 ** (attempt - 1))
                    logger.warning(
                        "retrying",
                        function=func.__name__,
                        attempt=attempt,
                        delay=delay,
                        error_type=type(e).__name__,
                    )
                    await asyncio.sleep(delay)
                    attempt += 1
        return wrapper
    return decorator
