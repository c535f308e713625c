"""initial schema: problem, submission, user

Revision ID: 3f9a1c2d7e40
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9a1c2d7e40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'problem',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('slug', sa.String(200), nullable=False, server_default=''),
        sa.Column('title', sa.String(200), nullable=False, server_default=''),
        sa.Column('difficulty', sa.String(20), nullable=False, server_default='medium'),
        sa.Column('category', sa.String(100), nullable=False, server_default=''),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('examples', sa.JSON(), nullable=True),
        sa.Column('constraints', sa.JSON(), nullable=True),
        sa.Column('starter_code', sa.JSON(), nullable=True),
        sa.Column('hints', sa.JSON(), nullable=True),
        sa.Column('test_cases', sa.JSON(), nullable=True),
        sa.Column('extra', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    with op.batch_alter_table('problem', schema=None) as batch_op:
        batch_op.create_index('ix_problem_slug', ['slug'])

    op.create_table(
        'submission',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.JSON(), nullable=True),
        sa.Column('problem_id', sa.JSON(), nullable=True),
        sa.Column('code', sa.Text(), nullable=False, server_default=''),
        sa.Column('language', sa.String(50), nullable=False, server_default=''),
        sa.Column('status', sa.String(30), nullable=False),
        sa.Column('timestamp', sa.String(40), nullable=False),
    )

    op.create_table(
        'user',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(120), nullable=False, server_default=''),
        sa.Column('email', sa.String(120), nullable=False),
        sa.Column('password_hash', sa.String(256), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_activity', sa.BigInteger(), nullable=True),
    )
    with op.batch_alter_table('user', schema=None) as batch_op:
        batch_op.create_index('ix_user_email', ['email'], unique=True)


def downgrade():
    op.drop_table('user')
    op.drop_table('submission')
    op.drop_table('problem')
