"""create_folders_table

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'folders',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column(
            'parent_id',
            sa.String(36),
            sa.ForeignKey('folders.id', ondelete='RESTRICT'),
            nullable=True,
        ),
        sa.Column('created_at', sa.TIMESTAMP(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('idx_folders_parent_id', 'folders', ['parent_id'])
    op.create_index('idx_folders_created', 'folders', ['created_at'])
    # At most one root: unique over the rows whose parent_id is NULL.
    op.create_index(
        'uq_folders_single_root',
        'folders',
        [sa.text('(parent_id IS NULL)')],
        unique=True,
        sqlite_where=sa.text('parent_id IS NULL'),
        postgresql_where=sa.text('parent_id IS NULL'),
    )


def downgrade() -> None:
    op.drop_index('uq_folders_single_root', table_name='folders')
    op.drop_index('idx_folders_created', table_name='folders')
    op.drop_index('idx_folders_parent_id', table_name='folders')
    op.drop_table('folders')
