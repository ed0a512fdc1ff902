"""Repository item model.

Items are the only resource kind handles can currently be minted for.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, Integer, Sequence
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from org.repository.handle.model.base import Base

item_seq = Sequence("item_seq", metadata=Base.metadata)


class Item(Base):
    __tablename__ = "item"

    item_id: Mapped[int] = mapped_column(Integer, item_seq, primary_key=True)
    last_modified: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )


async def find_item(database_session: AsyncSession, item_id: int) -> Optional[Item]:
    """Load an item by id, or None if it no longer exists."""
    return await database_session.get(Item, item_id)


def item_id_of(value: Any) -> Optional[int]:
    """Return the id of ``value`` if it is an item."""
    if isinstance(value, Item):
        return value.item_id
    return None
