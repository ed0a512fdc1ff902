"""Persistent identifier records.

Provides the SQLAlchemy model for handle records and the statements used to
look them up, enumerate them by prefix, and mint new ones.
"""

from typing import Optional

from sqlalchemy import Index, Integer, Sequence, SmallInteger, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Mapped, mapped_column

from org.repository.handle.model.base import Base, str256
from org.repository.handle.model.resource_types import ResourceType

handle_seq = Sequence("handle_seq", metadata=Base.metadata)


class HandleRecord(Base):
    """Handle to repository object mapping.

    The handle string is the public identifier; ``handle_id`` is drawn from
    ``handle_seq`` and doubles as the numeric suffix of minted handles.
    ``resource_type_id`` and ``resource_id`` are nullable at the column level
    but are always written together.
    """

    __tablename__ = "handle"

    handle_id: Mapped[int] = mapped_column(Integer, handle_seq, primary_key=True)
    handle: Mapped[str256]
    resource_type_id: Mapped[Optional[int]] = mapped_column(SmallInteger, nullable=True)
    resource_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        Index("idx_handle_handle", "handle", unique=True),
        Index("idx_handle_resource", "resource_type_id", "resource_id"),
    )


def select_handle_stmt(handle: str):
    """Select the record for a handle by its unique key."""
    return select(HandleRecord).where(HandleRecord.handle == handle)


def select_resource_handle_stmt(resource_type: ResourceType, resource_id: int):
    """Select the handle for a repository object.

    If several handles point at the same object the earliest minted one is
    returned.
    """
    return (
        select(HandleRecord.handle)
        .where(
            HandleRecord.resource_type_id == int(resource_type),
            HandleRecord.resource_id == resource_id,
        )
        .order_by(HandleRecord.handle_id)
        .limit(1)
    )


def select_prefix_handles_stmt(prefix: str):
    """Select every handle starting with ``prefix``.

    ``prefix`` is bound as a parameter and its LIKE metacharacters are escaped,
    so it only ever matches literally.
    """
    return select(HandleRecord.handle).where(
        HandleRecord.handle.startswith(prefix, autoescape=True)
    )


def next_handle_id_stmt():
    """Allocate the next value of ``handle_seq``."""
    return select(handle_seq.next_value())


def insert_handle_stmt(
    handle_id: int, handle: str, resource_type: ResourceType, resource_id: int
):
    """Create the insert statement for a newly minted handle.

    Returns the handle string of the inserted row.
    """
    return (
        insert(HandleRecord)
        .values(
            [
                {
                    "handle_id": handle_id,
                    "handle": handle,
                    "resource_type_id": int(resource_type),
                    "resource_id": resource_id,
                }
            ]
        )
        .returning(HandleRecord.handle)
    )
