"""Initial schema: users, challenges, challenge history, workout sessions

Revision ID: 001
Revises:
Create Date: 2024-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


gender_enum = sa.Enum('male', 'female', 'other', name='gender')
status_enum = sa.Enum('active', 'completed', 'abandoned', name='challengestatus')


def upgrade() -> None:
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('telegram_id', sa.BigInteger(), nullable=False),
        sa.Column('username', sa.String(64), nullable=True),
        sa.Column('first_name', sa.String(64), nullable=True),
        sa.Column('last_name', sa.String(64), nullable=True),
        sa.Column('timezone', sa.String(64), nullable=True),
        sa.Column('gender', gender_enum, nullable=True),
        sa.Column('weight', sa.Float(), nullable=True),
        sa.Column('height', sa.Float(), nullable=True),
        sa.Column('total_reps', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_sessions', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_calories', sa.Float(), nullable=False, server_default='0'),
        sa.Column('last_activity', sa.DateTime(), nullable=True),
        sa.Column('current_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('longest_streak', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_connection', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_user_telegram_id', 'user', ['telegram_id'], unique=True)

    op.create_table(
        'user_challenge',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False),
        sa.Column('challenge_id', sa.String(64), nullable=False),
        sa.Column('definition_snapshot', sa.JSON(), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('last_log_date', sa.DateTime(), nullable=True),
        sa.Column('total_progress', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', status_enum, nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_user_challenge_user_id', 'user_challenge', ['user_id'])
    op.create_index('ix_user_challenge_challenge_id', 'user_challenge', ['challenge_id'])
    op.create_index('ix_user_challenge_status', 'user_challenge', ['status'])

    op.create_table(
        'challenge_log',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            'user_challenge_id',
            sa.Integer(),
            sa.ForeignKey('user_challenge.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('completed', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('catch_up', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_challenge_log_user_challenge_id', 'challenge_log', ['user_challenge_id'])
    # One completed entry per instance and calendar day
    op.create_index(
        'uq_challenge_log_completed_day',
        'challenge_log',
        ['user_challenge_id', 'date'],
        unique=True,
        sqlite_where=sa.text('completed = 1'),
        postgresql_where=sa.text('completed'),
    )

    op.create_table(
        'workout_session',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('exercises', sa.JSON(), nullable=False),
        sa.Column('total_reps', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_calories', sa.Float(), nullable=False, server_default='0'),
        sa.Column('category', sa.String(32), nullable=True),
        sa.Column('challenge_id', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_workout_session_user_id', 'workout_session', ['user_id'])
    op.create_index('ix_workout_session_category', 'workout_session', ['category'])


def downgrade() -> None:
    op.drop_table('workout_session')
    op.drop_index('uq_challenge_log_completed_day', table_name='challenge_log')
    op.drop_table('challenge_log')
    op.drop_table('user_challenge')
    op.drop_table('user')
    status_enum.drop(op.get_bind(), checkfirst=True)
    gender_enum.drop(op.get_bind(), checkfirst=True)
