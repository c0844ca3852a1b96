"""create scores table

Revision ID: 5c2a9e71b3d0
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2a9e71b3d0'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'scores' in insp.get_table_names():
        return
    op.create_table(
        'scores',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('level', sa.String(length=20), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('total', sa.Integer(), nullable=False),
        sa.Column('percentage', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('date_played', sa.DateTime(), nullable=False),
    )
    with op.batch_alter_table('scores') as batch_op:
        batch_op.create_index('ix_scores_level', ['level'])
        batch_op.create_index('ix_scores_date_played', ['date_played'])


def downgrade():
    with op.batch_alter_table('scores') as batch_op:
        batch_op.drop_index('ix_scores_date_played')
        batch_op.drop_index('ix_scores_level')
    op.drop_table('scores')
