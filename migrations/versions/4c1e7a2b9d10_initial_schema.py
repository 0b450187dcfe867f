"""initial schema

Revision ID: 4c1e7a2b9d10
Revises:
Create Date: 2026-10-17 09:12:04.118230

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c1e7a2b9d10'
down_revision = None
branch_labels = None
depends_on = None

GROUP_KINDS = "('none','superset','circuit','dropset','biset','triset')"
BLOCK_TYPES = "('warmup','cardio','stretch','other')"
BLOCK_POSITIONS = "('start','end')"


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=120), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint("role IN ('admin','trainer','client')", name='check_user_role'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'], unique=False)

    op.create_table(
        'library_exercises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('video_url', sa.String(length=255), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('muscle_groups', sa.JSON(), nullable=True),
        sa.Column('equipment_needed', sa.JSON(), nullable=True),
        sa.Column('default_sets', sa.Integer(), nullable=True),
        sa.Column('default_reps', sa.String(length=20), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['created_by'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_library_exercises_name', 'library_exercises', ['name'], unique=False)
    op.create_index('idx_library_exercises_category', 'library_exercises', ['category'], unique=False)

    op.create_table(
        'template_folders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=False),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['parent_id'], ['template_folders.id']),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_template_folders_trainer_id', 'template_folders', ['trainer_id'], unique=False)

    op.create_table(
        'plan_templates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=False),
        sa.Column('folder_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('category', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['folder_id'], ['template_folders.id']),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_plan_templates_trainer_id', 'plan_templates', ['trainer_id'], unique=False)
    op.create_index('ix_plan_templates_folder_id', 'plan_templates', ['folder_id'], unique=False)

    op.create_table(
        'template_blocks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('position', sa.String(length=10), nullable=False),
        sa.Column('ordinal', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('estimated_minutes', sa.Integer(), nullable=True),
        sa.Column('config', sa.JSON(), nullable=True),
        sa.CheckConstraint(f"type IN {BLOCK_TYPES}", name='check_template_block_type'),
        sa.CheckConstraint(f"position IN {BLOCK_POSITIONS}", name='check_template_block_position'),
        sa.ForeignKeyConstraint(['template_id'], ['plan_templates.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_template_blocks_template_id', 'template_blocks', ['template_id'], unique=False)

    op.create_table(
        'template_exercises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=False),
        sa.Column('library_exercise_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('video_url', sa.String(length=255), nullable=True),
        sa.Column('sets', sa.Integer(), nullable=True),
        sa.Column('reps', sa.String(length=20), nullable=True),
        sa.Column('load', sa.String(length=30), nullable=True),
        sa.Column('rest_seconds', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('ordinal', sa.Integer(), nullable=False),
        sa.Column('group_id', sa.String(length=36), nullable=True),
        sa.Column('group_kind', sa.String(length=20), nullable=False),
        sa.Column('group_ordinal', sa.Integer(), nullable=True),
        sa.Column('group_rest_seconds', sa.Integer(), nullable=True),
        sa.CheckConstraint(f"group_kind IN {GROUP_KINDS}", name='check_template_exercise_group_kind'),
        sa.ForeignKeyConstraint(['library_exercise_id'], ['library_exercises.id']),
        sa.ForeignKeyConstraint(['template_id'], ['plan_templates.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_template_exercises_template_id', 'template_exercises', ['template_id'], unique=False)

    op.create_table(
        'weekly_plans',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=False),
        sa.Column('template_id', sa.Integer(), nullable=True),
        sa.Column('week_start', sa.Date(), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('day_ordinal', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('day_of_week BETWEEN 0 AND 6', name='check_plan_day_of_week'),
        sa.ForeignKeyConstraint(['client_id'], ['users.id']),
        sa.ForeignKeyConstraint(['template_id'], ['plan_templates.id']),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'client_id', 'trainer_id', 'week_start', 'day_of_week', 'day_ordinal',
            name='uq_weekly_plan_slot',
        ),
    )
    op.create_index('ix_weekly_plans_client_id', 'weekly_plans', ['client_id'], unique=False)
    op.create_index('ix_weekly_plans_trainer_id', 'weekly_plans', ['trainer_id'], unique=False)
    op.create_index('idx_weekly_plans_client_week', 'weekly_plans', ['client_id', 'week_start'], unique=False)

    op.create_table(
        'plan_blocks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('plan_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('position', sa.String(length=10), nullable=False),
        sa.Column('ordinal', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('estimated_minutes', sa.Integer(), nullable=True),
        sa.Column('required', sa.Boolean(), nullable=True),
        sa.Column('config', sa.JSON(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(f"type IN {BLOCK_TYPES}", name='check_block_type'),
        sa.CheckConstraint(f"position IN {BLOCK_POSITIONS}", name='check_block_position'),
        sa.ForeignKeyConstraint(['plan_id'], ['weekly_plans.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_plan_blocks_plan_id', 'plan_blocks', ['plan_id'], unique=False)
    op.create_index('idx_plan_blocks_partition', 'plan_blocks', ['plan_id', 'position', 'ordinal'], unique=False)

    op.create_table(
        'plan_exercises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('plan_id', sa.Integer(), nullable=False),
        sa.Column('library_exercise_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('video_url', sa.String(length=255), nullable=True),
        sa.Column('sets', sa.Integer(), nullable=True),
        sa.Column('reps', sa.String(length=20), nullable=True),
        sa.Column('load', sa.String(length=30), nullable=True),
        sa.Column('executed_load', sa.String(length=30), nullable=True),
        sa.Column('rest_seconds', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('ordinal', sa.Integer(), nullable=False),
        sa.Column('group_id', sa.String(length=36), nullable=True),
        sa.Column('group_kind', sa.String(length=20), nullable=False),
        sa.Column('group_ordinal', sa.Integer(), nullable=True),
        sa.Column('group_rest_seconds', sa.Integer(), nullable=True),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(f"group_kind IN {GROUP_KINDS}", name='check_exercise_group_kind'),
        sa.ForeignKeyConstraint(['library_exercise_id'], ['library_exercises.id']),
        sa.ForeignKeyConstraint(['plan_id'], ['weekly_plans.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_plan_exercises_plan_id', 'plan_exercises', ['plan_id'], unique=False)
    op.create_index('ix_plan_exercises_group_id', 'plan_exercises', ['group_id'], unique=False)
    op.create_index('idx_plan_exercises_plan_ordinal', 'plan_exercises', ['plan_id', 'ordinal'], unique=False)

    op.create_table(
        'workout_sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('plan_id', sa.Integer(), nullable=False),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('paused_at', sa.DateTime(), nullable=True),
        sa.Column('paused_seconds', sa.Integer(), nullable=False),
        sa.Column('rest_seconds', sa.Integer(), nullable=False),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "status IN ('not_started','running','paused','finished','abandoned')",
            name='check_session_status',
        ),
        sa.ForeignKeyConstraint(['client_id'], ['users.id']),
        sa.ForeignKeyConstraint(['plan_id'], ['weekly_plans.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_workout_sessions_plan_id', 'workout_sessions', ['plan_id'], unique=False)
    op.create_index('ix_workout_sessions_client_id', 'workout_sessions', ['client_id'], unique=False)
    op.create_index(
        'uq_workout_sessions_active', 'workout_sessions', ['client_id', 'plan_id'], unique=True,
        postgresql_where=sa.text("status IN ('running','paused')"),
        sqlite_where=sa.text("status IN ('running','paused')"),
    )

    op.create_table(
        'rest_intervals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('kind', sa.String(length=20), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=False),
        sa.Column('ended_at', sa.DateTime(), nullable=True),
        sa.Column('duration_seconds', sa.Integer(), nullable=True),
        sa.CheckConstraint("kind IN ('between_sets','between_groups')", name='check_rest_kind'),
        sa.ForeignKeyConstraint(['session_id'], ['workout_sessions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_rest_intervals_session_id', 'rest_intervals', ['session_id'], unique=False)
    op.create_index(
        'uq_rest_intervals_open', 'rest_intervals', ['session_id'], unique=True,
        postgresql_where=sa.text('ended_at IS NULL'),
        sqlite_where=sa.text('ended_at IS NULL'),
    )

    op.create_table(
        'active_weeks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('trainer_id', sa.Integer(), nullable=False),
        sa.Column('week_start', sa.Date(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['client_id'], ['users.id']),
        sa.ForeignKeyConstraint(['trainer_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('client_id', 'trainer_id', name='uq_active_week_client_trainer'),
    )
    op.create_index('ix_active_weeks_client_id', 'active_weeks', ['client_id'], unique=False)


def downgrade():
    op.drop_table('active_weeks')
    op.drop_table('rest_intervals')
    op.drop_table('workout_sessions')
    op.drop_table('plan_exercises')
    op.drop_table('plan_blocks')
    op.drop_table('weekly_plans')
    op.drop_table('template_exercises')
    op.drop_table('template_blocks')
    op.drop_table('plan_templates')
    op.drop_table('template_folders')
    op.drop_table('library_exercises')
    op.drop_table('users')
