"""init

Revision ID: 4f2c9d71a0b3
Revises:
Create Date: 2026-10-19 09:12:40.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "4f2c9d71a0b3"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute(sa.schema.CreateSequence(sa.Sequence("handle_seq")))
    op.execute(sa.schema.CreateSequence(sa.Sequence("item_seq")))

    op.create_table(
        "item",
        sa.Column(
            "item_id",
            sa.Integer,
            sa.Sequence("item_seq"),
            primary_key=True,
            server_default=sa.text("nextval('item_seq')"),
        ),
        sa.Column("last_modified", sa.DateTime(timezone=True), nullable=False),
    )

    # Suffixes of minted handles are drawn from handle_seq, so handle_id is
    # always supplied by the application rather than defaulted.
    op.create_table(
        "handle",
        sa.Column("handle_id", sa.Integer, primary_key=True),
        sa.Column("handle", sa.String(256), nullable=False),
        sa.Column("resource_type_id", sa.SmallInteger, nullable=True),
        sa.Column("resource_id", sa.Integer, nullable=True),
    )
    op.create_index("idx_handle_handle", "handle", ["handle"], unique=True)
    op.create_index(
        "idx_handle_resource", "handle", ["resource_type_id", "resource_id"]
    )


def downgrade() -> None:
    op.drop_table("handle")
    op.drop_table("item")
    op.execute(sa.schema.DropSequence(sa.Sequence("item_seq")))
    op.execute(sa.schema.DropSequence(sa.Sequence("handle_seq")))
