"""Initial migration

Revision ID: 001
Revises: 
Create Date: 2025-07-01 12:39:42.000000

"""
from alembic import op
import sqlalchemy as sa
import uuid

from app.domain.analytics.models import HISTORICAL_VOLUME_SEED

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create identities table
    op.create_table(
        'identities',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('raw_user_meta_data', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('last_sign_in_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_identities_email', 'identities', ['email'], unique=True)

    # Create profiles table
    op.create_table(
        'profiles',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('profile_picture_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.CheckConstraint("role IN ('patient', 'surgeon', 'admin')", name='ck_profiles_role'),
        sa.ForeignKeyConstraint(['id'], ['identities.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_profiles_email', 'profiles', ['email'], unique=True)
    op.create_index('idx_profiles_role', 'profiles', ['role'], unique=False)

    # Create patient_details table
    op.create_table(
        'patient_details',
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('personal_info', sa.JSON(), nullable=False),
        sa.Column('physical_info', sa.JSON(), nullable=False),
        sa.Column('lifestyle_info', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id'),
    )

    # Create surgeon_details table
    op.create_table(
        'surgeon_details',
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('specialty', sa.String(length=200), nullable=False),
        sa.Column('hospital_affiliation', sa.String(length=200), nullable=False),
        sa.Column('years_of_experience', sa.Integer(), nullable=False),
        sa.Column('certifications', sa.JSON(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('consultation_fee', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id'),
    )

    # Create vital_signs table
    op.create_table(
        'vital_signs',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('patient_id', sa.Uuid(), nullable=False),
        sa.Column('heart_rate', sa.Integer(), nullable=False),
        sa.Column('systolic_bp', sa.Integer(), nullable=False),
        sa.Column('diastolic_bp', sa.Integer(), nullable=False),
        sa.Column('body_temperature_celsius', sa.Numeric(precision=4, scale=2), nullable=False),
        sa.Column('respiratory_rate', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.ForeignKeyConstraint(['patient_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_vital_signs_patient_id', 'vital_signs', ['patient_id'], unique=False)
    op.create_index('idx_vital_signs_created_at', 'vital_signs', ['created_at'], unique=False)

    # Create surgical_history table
    op.create_table(
        'surgical_history',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('patient_id', sa.Uuid(), nullable=False),
        sa.Column('surgeon_id', sa.Uuid(), nullable=True),
        sa.Column('procedure_name', sa.String(length=255), nullable=False),
        sa.Column('hospital', sa.String(length=255), nullable=False),
        sa.Column('surgery_date', sa.Date(), nullable=False),
        sa.Column('outcome', sa.Text(), nullable=True),
        sa.Column('complications', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.ForeignKeyConstraint(['patient_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['surgeon_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_surgical_history_patient_id', 'surgical_history', ['patient_id'], unique=False)
    op.create_index('idx_surgical_history_surgeon_id', 'surgical_history', ['surgeon_id'], unique=False)

    # Create surgical_cases table
    op.create_table(
        'surgical_cases',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('patient_id', sa.Uuid(), nullable=False),
        sa.Column('surgeon_id', sa.Uuid(), nullable=True),
        sa.Column('procedure_name', sa.String(length=255), nullable=False),
        sa.Column('scheduled_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('priority', sa.String(length=20), nullable=True),
        sa.Column('estimated_duration_minutes', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.CheckConstraint(
            "status IN ('proposed', 'scheduled', 'in_progress', 'completed', 'cancelled')",
            name='ck_surgical_cases_status'
        ),
        sa.CheckConstraint(
            "priority IN ('low', 'medium', 'high', 'emergency')",
            name='ck_surgical_cases_priority'
        ),
        sa.ForeignKeyConstraint(['patient_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['surgeon_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_surgical_cases_patient_id', 'surgical_cases', ['patient_id'], unique=False)
    op.create_index('idx_surgical_cases_surgeon_id', 'surgical_cases', ['surgeon_id'], unique=False)
    op.create_index('idx_surgical_cases_status', 'surgical_cases', ['status'], unique=False)

    # Create historical_surgical_data table
    historical = op.create_table(
        'historical_surgical_data',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('hospital_id', sa.String(length=50), nullable=False),
        sa.Column('week_number', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('surgical_volume', sa.Integer(), nullable=False),
        sa.Column('specialty', sa.String(length=200), nullable=True),
        sa.Column('season', sa.String(length=10), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.CheckConstraint(
            "season IN ('spring', 'summer', 'fall', 'winter')",
            name='ck_historical_surgical_data_season'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'idx_historical_data_hospital_year', 'historical_surgical_data',
        ['hospital_id', 'year'], unique=False
    )

    # Sample volume rows
    op.bulk_insert(
        historical,
        [dict(row, id=uuid.uuid4()) for row in HISTORICAL_VOLUME_SEED]
    )


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('historical_surgical_data')
    op.drop_table('surgical_cases')
    op.drop_table('surgical_history')
    op.drop_table('vital_signs')
    op.drop_table('surgeon_details')
    op.drop_table('patient_details')
    op.drop_table('profiles')
    op.drop_table('identities')
