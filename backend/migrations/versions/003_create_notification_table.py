"""Create notification table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19 10:20:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '003'
down_revision = '002'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'notification',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', sa.Text(), nullable=False),
        sa.Column('document_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('document_type', sa.Text(), nullable=True),
        sa.Column('related_link', sa.Text(), nullable=True),
        sa.Column('is_read', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        # Notifications outlive the document they point at
        sa.ForeignKeyConstraint(['document_id'], ['document.id'], ondelete='SET NULL'),
        sa.CheckConstraint(
            "type IN ('document_uploaded', 'document_approved', 'document_rejected')",
            name='ck_notification_type',
        ),
    )

    op.create_index('ix_notification_user_created', 'notification', ['user_id', 'created_at'])
    op.create_index(
        'idx_notification_user_unread',
        'notification',
        ['user_id'],
        postgresql_where=sa.text('is_read = false'),
    )


def downgrade():
    op.drop_index('idx_notification_user_unread', table_name='notification')
    op.drop_index('ix_notification_user_created', table_name='notification')
    op.drop_table('notification')
