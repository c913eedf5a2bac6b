"""create card_flip_scores

Revision ID: 5c2d7e91a0b3
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2d7e91a0b3'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'card_flip_scores' in set(insp.get_table_names()):
        return

    op.create_table(
        'card_flip_scores',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('player_name', sa.String(length=64), nullable=False),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('matches', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('elapsed_seconds', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_card_flip_scores_completed_at', 'card_flip_scores', ['completed_at'])


def downgrade():
    op.drop_index('ix_card_flip_scores_completed_at', table_name='card_flip_scores')
    op.drop_table('card_flip_scores')
