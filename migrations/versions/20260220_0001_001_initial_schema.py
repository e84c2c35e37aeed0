"""Initial schema - all KnockoutDesk tables

Revision ID: 001
Revises:
Create Date: 2026-02-20

Creates all tables for the KnockoutDesk bracket console:
- teams: Club teams
- competitions: Tournaments and leagues
- competition_teams: Team registrations with seed and elimination round
- tournament_brackets: One row per bracket match
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ### Teams table ###
    op.create_table(
        'teams',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('abbreviation', sa.String(5), nullable=False, server_default=''),
        sa.Column('primary_color', sa.String(7), server_default='#2196F3'),
        sa.Column('secondary_color', sa.String(7), server_default='#FFFFFF'),
    )

    # ### Competitions table ###
    op.create_table(
        'competitions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('competition_type', sa.Enum(
            'TOURNAMENT', 'LEAGUE',
            name='competitiontype'
        ), nullable=False, server_default='TOURNAMENT'),
        sa.Column('bracket_version', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('winner_team_id', sa.Integer(), sa.ForeignKey('teams.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )

    # ### Competition registrations ###
    op.create_table(
        'competition_teams',
        sa.Column('competition_id', sa.Integer(),
                  sa.ForeignKey('competitions.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('team_id', sa.Integer(),
                  sa.ForeignKey('teams.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('seed', sa.Integer(), nullable=True),
        sa.Column('is_eliminated', sa.Boolean(), nullable=False, server_default='0'),
        sa.Column('elimination_round', sa.Integer(), nullable=True),
    )

    # ### Bracket matches ###
    op.create_table(
        'tournament_brackets',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('competition_id', sa.Integer(),
                  sa.ForeignKey('competitions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('match_id', sa.Integer(), nullable=False),
        sa.Column('round_number', sa.Integer(), nullable=False),
        sa.Column('round_name', sa.String(100), nullable=True),
        sa.Column('match_number', sa.Integer(), nullable=False),
        sa.Column('home_team_id', sa.Integer(),
                  sa.ForeignKey('teams.id', ondelete='SET NULL'), nullable=True),
        sa.Column('away_team_id', sa.Integer(),
                  sa.ForeignKey('teams.id', ondelete='SET NULL'), nullable=True),
        sa.Column('winner_team_id', sa.Integer(),
                  sa.ForeignKey('teams.id', ondelete='SET NULL'), nullable=True),
        sa.Column('home_score', sa.Float(), nullable=True),
        sa.Column('away_score', sa.Float(), nullable=True),
        sa.Column('game_id', sa.Integer(), nullable=True),
        sa.Column('scheduled_date', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.UniqueConstraint('competition_id', 'round_number', 'match_number'),
        sa.UniqueConstraint('competition_id', 'match_id'),
    )

    # Create indexes for common queries
    op.create_index('ix_tournament_brackets_competition_id', 'tournament_brackets', ['competition_id'])
    op.create_index('ix_competition_teams_team_id', 'competition_teams', ['team_id'])


def downgrade() -> None:
    # Drop indexes
    op.drop_index('ix_competition_teams_team_id', 'competition_teams')
    op.drop_index('ix_tournament_brackets_competition_id', 'tournament_brackets')

    # Drop tables in reverse order of creation
    op.drop_table('tournament_brackets')
    op.drop_table('competition_teams')
    op.drop_table('competitions')
    op.drop_table('teams')
