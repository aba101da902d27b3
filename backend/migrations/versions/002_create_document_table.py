"""Create document table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19 10:10:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '002'
down_revision = '001'
branch_labels = None
depends_on = None


def upgrade():
    """Create document table with one row per (user, type)."""

    op.create_table(
        'document',
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),

        # File metadata
        sa.Column('file_name', sa.Text(), nullable=False),
        sa.Column('file_size', sa.BigInteger(), nullable=False),
        sa.Column('file_type', sa.Text(), nullable=False),
        sa.Column('storage_key', sa.Text(), nullable=False),

        # Review state
        sa.Column('status', sa.String(16), server_default='PENDING', nullable=False),
        sa.Column('uploaded_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('reviewed_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('reviewed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),

        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()'), nullable=False),

        # Constraints
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['user.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reviewed_by'], ['user.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('user_id', 'type', name='uq_document_user_type'),
        sa.CheckConstraint(
            "type IN ('PAN_CARD', 'AADHAR_CARD', 'CANCELLED_CHEQUE', 'OFFER_LETTER')",
            name='ck_document_type',
        ),
        sa.CheckConstraint("status IN ('PENDING', 'APPROVED', 'REJECTED')", name='ck_document_status'),
    )

    op.create_index('ix_document_status', 'document', ['status'])
    op.create_index('ix_document_uploaded_at', 'document', ['uploaded_at'])

    op.execute("""
        CREATE TRIGGER update_document_updated_at
        BEFORE UPDATE ON document
        FOR EACH ROW
        EXECUTE FUNCTION update_updated_at_column();
    """)


def downgrade():
    """Drop document table."""
    op.execute('DROP TRIGGER IF EXISTS update_document_updated_at ON document')
    op.drop_index('ix_document_uploaded_at', table_name='document')
    op.drop_index('ix_document_status', table_name='document')
    op.drop_table('document')
