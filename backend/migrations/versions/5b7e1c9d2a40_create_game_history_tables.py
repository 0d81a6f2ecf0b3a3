"""create game, game_player and game_guess history tables

Revision ID: 5b7e1c9d2a40
Revises:
Create Date: 2026-10-17 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5b7e1c9d2a40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'game' not in existing_tables:
        op.create_table(
            'game',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('room_code', sa.String(length=6), nullable=False),
            sa.Column('created_at', sa.DateTime(), nullable=False),
            sa.Column('ended_at', sa.DateTime(), nullable=False),
            sa.Column('winner_player_name', sa.String(length=64), nullable=False),
            sa.Column('total_players', sa.Integer(), nullable=False),
        )
        op.create_index('ix_game_room_code', 'game', ['room_code'])
        op.create_index('ix_game_ended_at', 'game', ['ended_at'])

    if 'game_player' not in existing_tables:
        op.create_table(
            'game_player',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_id', sa.Integer(), sa.ForeignKey('game.id'), nullable=False),
            sa.Column('player_name', sa.String(length=64), nullable=False),
            sa.Column('submitted_word', sa.String(length=64), nullable=False),
            sa.Column('final_family_leader_name', sa.String(length=64), nullable=False),
            sa.Column('was_winner', sa.Boolean(), nullable=False),
        )
        op.create_index('ix_game_player_game_id', 'game_player', ['game_id'])

    if 'game_guess' not in existing_tables:
        op.create_table(
            'game_guess',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('game_id', sa.Integer(), sa.ForeignKey('game.id'), nullable=False),
            sa.Column('guesser_player_name', sa.String(length=64), nullable=False),
            sa.Column('guessed_player_name', sa.String(length=64), nullable=False),
            sa.Column('guessed_word', sa.Text(), nullable=False),
            sa.Column('was_correct', sa.Boolean(), nullable=False),
            sa.Column('timestamp', sa.DateTime(), nullable=False),
        )
        op.create_index('ix_game_guess_game_id', 'game_guess', ['game_id'])


def downgrade():
    op.drop_table('game_guess')
    op.drop_table('game_player')
    op.drop_table('game')
