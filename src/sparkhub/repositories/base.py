"""Base repository with common CRUD operations."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.sparkhub.schemas.pagination import decode_cursor, encode_cursor

_CURSOR_SEPARATOR = "|"

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit) is done
    by the service layer so that one service call can span several
    repositories in a single transaction.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID, for_update: bool = False) -> ModelType | None:
        """Get a record by its primary key.

        With ``for_update`` the row is locked (where the dialect supports it)
        and any copy already in the identity map is overwritten with the
        database state.
        """
        query = select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def reload(self, id: UUID) -> ModelType | None:
        """Read the stored row again, overwriting the session's copy."""
        query = (
            select(self.model)
            .where(self.model.id == id)  # type: ignore[attr-defined]
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    def update(self, entity: ModelType, fields: Mapping[str, Any]) -> ModelType:
        """Apply ``fields`` to an entity already tracked by the session (no commit)."""
        for name, value in fields.items():
            setattr(entity, name, value)
        self.session.add(entity)
        return entity

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int,
        cursor_field: Any,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Execute cursor-based pagination on a query, newest first.

        Rows sharing a ``cursor_field`` value are ordered by id, and the cursor
        carries both values, so a page boundary never skips a tie.

        Args:
            query: The base query to paginate
            cursor: Optional cursor from previous page (base64-encoded)
            limit: Maximum number of items to return
            cursor_field: The column used for ordering and as cursor value

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        id_field = self.model.id  # type: ignore[attr-defined]
        if cursor:
            try:
                raw_value, _, raw_id = decode_cursor(cursor).rpartition(_CURSOR_SEPARATOR)
                cursor_value: datetime | str
                try:
                    cursor_value = datetime.fromisoformat(raw_value)
                except ValueError:
                    cursor_value = raw_value
                last_id = UUID(raw_id)
                query = query.where(
                    or_(
                        cursor_field < cursor_value,
                        and_(cursor_field == cursor_value, id_field < last_id),
                    )
                )
            except (ValueError, TypeError):
                # Invalid cursor - start from the beginning
                pass

        query = query.order_by(cursor_field.desc(), id_field.desc()).limit(limit + 1)

        result = await self.session.execute(query)
        items = list(result.scalars().all())

        has_more = len(items) > limit
        if has_more:
            items = items[:limit]

        next_cursor = None
        if has_more and items:
            last = items[-1]
            value = getattr(last, cursor_field.key)
            if isinstance(value, datetime):
                value = value.isoformat()
            next_cursor = encode_cursor(f"{value}{_CURSOR_SEPARATOR}{last.id}")

        return items, next_cursor, has_more
