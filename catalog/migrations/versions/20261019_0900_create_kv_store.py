"""create_kv_store

Revision ID: 3f1c9a7e52d0
Revises:
Create Date: 2026-10-19 09:00:00.000000

Creates the single key-value table holding master data items, catalog
records and secondary catalog records under prefixed string keys.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7e52d0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the kv_store table."""
    op.create_table(
        'kv_store',
        sa.Column('key', sa.String(length=255), nullable=False),
        sa.Column('value', sa.Text(), nullable=False),
        sa.Column('written_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('key'),
    )


def downgrade() -> None:
    """Drop the kv_store table."""
    op.drop_table('kv_store')
