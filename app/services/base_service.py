"""
Base service class.

Session handling, service-bound logging, the transaction decorator and
status parsing shared by the service layer.
"""

import functools
from collections.abc import Callable
from enum import StrEnum
from typing import Any, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils.exceptions import InvalidStatusError


T = TypeVar("T")
S = TypeVar("S", bound=StrEnum)


def parse_status(status_cls: type[S], raw: str) -> S:
    """
    Parse a status value case-insensitively.

    Args:
        status_cls: Status enumeration (UserStatus, KycStatus, ...)
        raw: Value supplied by the caller

    Returns:
        Enumeration member

    Raises:
        InvalidStatusError: If the value is not a member of status_cls
    """
    try:
        return status_cls(raw.strip().lower())
    except (ValueError, AttributeError) as e:
        raise InvalidStatusError(
            str(raw), [member.value for member in status_cls]
        ) from e


class BaseService:
    """
    Base service class.

    Holds the request or job session and a logger bound to the service
    name, so every record carries `service=<ClassName>` in its extras.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize base service.

        Args:
            session: Async database session
        """
        self.session = session
        self.logger = logger.bind(service=self.__class__.__name__)

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


def transaction(func: Callable[..., T]) -> Callable[..., T]:
    """
    Run a service method as one unit of work.

    Commits after the method returns; on any exception rolls back, logs
    and re-raises, so domain errors reach the caller unchanged.

    Usage:
        @transaction
        async def approve_rank(self, user_id, rank_name):
            ...

    Args:
        func: Async method of a BaseService subclass

    Returns:
        Wrapped async method
    """
    @functools.wraps(func)
    async def wrapper(self: BaseService, *args: Any, **kwargs: Any) -> Any:
        try:
            result = await func(self, *args, **kwargs)
            await self.commit()
            return result
        except Exception as e:
            await self.rollback()
            self.logger.warning(
                f"Transaction rolled back in {func.__name__}",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise

    return wrapper
