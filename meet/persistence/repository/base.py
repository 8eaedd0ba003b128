"""Error translation shared by the PostgreSQL repositories."""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import logfire
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from meet.domain.error import StoreUnavailableError


@asynccontextmanager
async def store_errors(session: AsyncSession, operation: str) -> AsyncIterator[None]:
    """Re-raise database failures as StoreUnavailableError.

    The session is rolled back before the error is raised, so a session that
    outlives the failure (a live query's) can run its next statement.
    Writes already made in the session's transaction are discarded with it.

    Args:
        session: Session the operation runs in
        operation: Name of the repository operation, for logs and messages
    """
    try:
        yield
    except SQLAlchemyError as e:
        logfire.error("Database operation failed", operation=operation, error=str(e))
        try:
            await session.rollback()
        except SQLAlchemyError as rollback_error:
            logfire.warn(
                "Rollback after failed operation also failed",
                operation=operation,
                error=str(rollback_error),
            )
        raise StoreUnavailableError(f"{operation} failed: {e}") from e
