"""
Database decorators for automatic error handling and rollback.

Provides decorators to automatically roll back the session when an async
service method or function fails.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession


T = TypeVar("T")


def _find_session(args: tuple[Any, ...], kwargs: dict[str, Any]) -> AsyncSession | None:
    """Locate the session in kwargs, first positional arg, or on `self`."""
    session = kwargs.get("session")
    if session is not None:
        return session

    if args:
        first = args[0]
        if isinstance(first, AsyncSession):
            return first
        # Bound service methods carry the session on the instance
        return getattr(first, "session", None)

    return None


def with_rollback_on_error(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator that automatically rolls back the session on any exception.

    Usage:
        class PayoutStatusService:
            @with_rollback_on_error
            async def update_status(self, ...):
                ...
                await self.session.commit()

    The decorator will:
    1. Execute the wrapped function
    2. If an exception occurs, call session.rollback()
    3. Re-raise the exception for proper error handling

    Args:
        func: Async function or method. The session is taken from a `session`
              keyword, an AsyncSession first argument, or `self.session`.

    Returns:
        Wrapped function with automatic rollback on error
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        session = _find_session(args, kwargs)

        if session is None:
            logger.warning(
                f"Function {func.__name__} decorated with @with_rollback_on_error "
                f"but no session found. Rollback will not be performed."
            )
            return await func(*args, **kwargs)

        try:
            return await func(*args, **kwargs)
        except Exception as e:
            try:
                await session.rollback()
                logger.info(
                    f"Rollback performed in {func.__name__} due to error: {type(e).__name__}"
                )
            except Exception as rollback_error:
                logger.exception(
                    f"Failed to rollback in {func.__name__}: {rollback_error}"
                )
            raise

    return wrapper
