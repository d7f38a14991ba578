"""Shared plumbing for catalog repositories."""

from typing import Any

from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from classtree.domain.exceptions import ConflictError, ValidationError


class Repository:
    """Base class for repositories working inside one unit of work.

    Repositories never commit; the caller's unit of work decides whether
    the session is committed or rolled back.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session bound to the current transaction.
        """
        self.session = session

    async def _flush(self, entity_type: str, key: Any) -> None:
        """Flush pending writes, translating store rejections.

        Raises:
            ConflictError: If the store rejected the write on a unique constraint.
            ValidationError: If the store rejected a value, e.g. one longer
                than its column.
        """
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(entity_type, key) from e
        except DataError as e:
            raise ValidationError(entity_type, f"value rejected by the store for '{key}'") from e


def require_name(field: str, name: str | None) -> str:
    """Reject missing or blank names before they reach the store."""
    if name is None or not name.strip():
        raise ValidationError(field, "must not be empty")
    return name
