"""Error taxonomy and graceful-degradation helpers.

Exceptions:
- FoodSnapError: base class for every error raised by the adapters
- APIKeyNotFoundError: key missing from environment and key files
- NetworkError: transport failure or deadline exceeded
- NoDataReceivedError: empty response body or empty model text
- InvalidResponseError: undecodable or unexpectedly shaped response
- APIError: error message reported by the remote API

Helpers:
- safe_execute_async(): await with optional deadline, log failures, return a default
- safe_execute_sync(): synchronous counterpart
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from foodsnap.utils.logger import logger


class FoodSnapError(Exception):
    """Base class for FoodSnap errors."""


class APIKeyNotFoundError(FoodSnapError):
    def __init__(self, service: str) -> None:
        self.service = service
        super().__init__(f"{service} API key not found. Please add it to your .env file.")


class NetworkError(FoodSnapError):
    """Transport failure, including an expired deadline."""


class NoDataReceivedError(FoodSnapError):
    def __init__(self, message: str = "No data received from the API.") -> None:
        super().__init__(message)


class InvalidResponseError(FoodSnapError):
    def __init__(self, message: str = "Invalid response from the API.") -> None:
        super().__init__(message)


class APIError(FoodSnapError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"API Error: {message}")


# ============================================================================
# Error Handling Helpers
# ============================================================================


def _log_error(operation_name: str, exception: BaseException, log_level: str = "warning") -> None:
    """Log error with appropriate level."""
    msg = f"{operation_name}: {type(exception).__name__}: {exception}"
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "error":
        logger.error(msg)
    else:
        logger.warning(msg)


async def safe_execute_async(
    coro: Awaitable[Any],
    operation_name: str,
    log_level: str = "warning",
    default_return: Any = None,
    reraise: bool = False,
    timeout: Optional[float] = None,
) -> Any:
    """Safely execute async operation with consistent error logging.

    When timeout is given the awaitable runs under asyncio.wait_for, so an
    expired deadline cancels the underlying request and only one outcome is
    ever produced. The deadline surfaces as NetworkError.

    Args:
        coro: Awaitable to execute.
        operation_name: Description for logging (e.g., "Gemini recipe call").
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.
        reraise: If True, re-raise exception after logging. Default: False.
        timeout: Deadline in seconds. Default: None (no deadline).

    Returns:
        Result of coro if successful, default_return on exception if reraise=False.

    Raises:
        Exception: Original exception (or NetworkError for a deadline) if reraise=True.

    Example:
        recipe = await safe_execute_async(
            call_model(), "Recipe generation", default_return=Recipe.placeholder(), timeout=25
        )
    """
    try:
        if timeout is not None:
            return await asyncio.wait_for(coro, timeout=timeout)
        return await coro
    except asyncio.TimeoutError as e:
        error = NetworkError(f"{operation_name} timed out after {timeout}s")
        _log_error(operation_name, error, log_level)
        if reraise:
            raise error from e
        return default_return
    except Exception as e:
        _log_error(operation_name, e, log_level)
        if reraise:
            raise
        return default_return


def safe_execute_sync(
    func: Callable[[], Any],
    operation_name: str,
    log_level: str = "warning",
    default_return: Any = None,
    reraise: bool = False,
) -> Any:
    """Safely execute sync operation with consistent error logging.

    Synchronous version of safe_execute_async (without the deadline).

    Args:
        func: Callable to execute (no args).
        operation_name: Description for logging.
        log_level: Logging level ("debug", "warning", "error"). Default: "warning".
        default_return: Value to return on exception. Default: None.
        reraise: If True, re-raise exception after logging. Default: False.

    Returns:
        Result of func if successful, default_return on exception if reraise=False.
    """
    try:
        return func()
    except Exception as e:
        _log_error(operation_name, e, log_level)
        if reraise:
            raise
        return default_return
