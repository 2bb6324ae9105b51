"""Add documents table

Revision ID: doc001
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = 'doc001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def upgrade() -> None:
    op.create_table(
        'documents',
        sa.Column('collection', sa.String(length=64), nullable=False),
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=True),
        sa.Column('data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('collection', 'id')
    )
    op.create_index('ix_documents_collection_user', 'documents', ['collection', 'user_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_documents_collection_user', table_name='documents')
    op.drop_table('documents')
