"""Handle record store backed by SQLAlchemy.

The store holds no state of its own. Every call runs on the session supplied
by the caller, who owns the transaction.
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from org.repository.handle.model.handles import (
    HandleRecord,
    insert_handle_stmt,
    next_handle_id_stmt,
    select_handle_stmt,
    select_prefix_handles_stmt,
    select_resource_handle_stmt,
)
from org.repository.handle.model.resource_types import ResourceType


class HandleStore:

    async def find_by_handle(
        self, database_session: AsyncSession, handle: str
    ) -> Optional[HandleRecord]:
        result = await database_session.execute(select_handle_stmt(handle))
        return result.scalar_one_or_none()

    async def find_by_resource(
        self,
        database_session: AsyncSession,
        resource_type: ResourceType,
        resource_id: int,
    ) -> Optional[str]:
        result = await database_session.execute(
            select_resource_handle_stmt(resource_type, resource_id)
        )
        return result.scalar_one_or_none()

    async def find_by_prefix(
        self, database_session: AsyncSession, prefix: str
    ) -> List[str]:
        result = await database_session.execute(select_prefix_handles_stmt(prefix))
        return list(result.scalars().all())

    async def allocate_id(self, database_session: AsyncSession) -> int:
        """Draw the next id from ``handle_seq``.

        Sequence allocation is atomic and never hands out the same value
        twice, even across concurrent transactions or after a rollback.
        """
        return await database_session.scalar(next_handle_id_stmt())

    async def insert(
        self,
        database_session: AsyncSession,
        handle_id: int,
        handle: str,
        resource_type: ResourceType,
        resource_id: int,
    ) -> str:
        result = await database_session.execute(
            insert_handle_stmt(handle_id, handle, resource_type, resource_id)
        )
        return result.scalar_one()
