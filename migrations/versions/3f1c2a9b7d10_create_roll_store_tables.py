"""Create roll store tables

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2025-12-02 10:30:00.000000

"""
import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision = '3f1c2a9b7d10'
down_revision = None
branch_labels = None
depends_on = None


def _record_columns():
    return [
        sa.Column('booth_no', sa.String(length=32), nullable=False, server_default=''),
        sa.Column('ward_no', sa.String(length=32), nullable=False, server_default=''),
        sa.Column('voter_serial', sa.String(length=32), nullable=False, server_default=''),
        sa.Column('house_no', sa.String(length=64), nullable=False, server_default=''),
        sa.Column('svn', sa.String(length=64), nullable=False),
        sa.Column('voter_name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('relative_name', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('gender', sa.String(length=16), nullable=False, server_default=''),
        sa.Column('age', sa.String(length=16), nullable=False, server_default=''),
        sa.Column('aadhaar', sa.String(length=32), nullable=False, server_default=''),
        sa.Column('dob', sa.String(length=32), nullable=False, server_default=''),
        sa.Column('calculated_age', sa.String(length=16), nullable=False, server_default=''),
        sa.Column('aadhaar_image', sa.Text(), nullable=False, server_default=''),
    ]


def upgrade():
    # Active roll
    op.create_table(
        'roll_rows',
        sa.Column('id', sa.Integer(), nullable=False),
        *_record_columns(),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_roll_rows_svn'), 'roll_rows', ['svn'], unique=False)

    # Removed log; rows keep their content plus the reason
    op.create_table(
        'removed_rows',
        sa.Column('id', sa.Integer(), nullable=False),
        *_record_columns(),
        sa.Column('reason', sa.String(length=32), nullable=False),
        sa.Column('original_row_id', sa.Integer(), nullable=True),
        sa.Column('removed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_removed_rows_svn'), 'removed_rows', ['svn'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_removed_rows_svn'), table_name='removed_rows')
    op.drop_table('removed_rows')
    op.drop_index(op.f('ix_roll_rows_svn'), table_name='roll_rows')
    op.drop_table('roll_rows')
