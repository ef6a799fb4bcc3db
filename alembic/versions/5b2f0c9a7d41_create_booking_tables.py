"""create booking tables

Revision ID: 5b2f0c9a7d41
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5b2f0c9a7d41'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Appointments
    op.create_table(
        'appointments',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('client_name', sa.String(50), nullable=False),
        sa.Column('phone_number', sa.String(20), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='confirmed'),
        sa.Column('google_event_id', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_appointments_phone_number', 'appointments', ['phone_number'])
    op.create_index('ix_appointments_date', 'appointments', ['date'])
    op.create_index('ix_appointments_status', 'appointments', ['status'])
    op.create_index('idx_appointments_status_start', 'appointments', ['status', 'start_time'])

    # 2. Explicit per-date windows
    op.create_table(
        'available_slots',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('reason', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_available_slots_date', 'available_slots', ['date'])

    # 3. Closures
    op.create_table(
        'blocked_dates',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_full_day', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('start_time', sa.String(5), nullable=True),
        sa.Column('end_time', sa.String(5), nullable=True),
        sa.Column('reason', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_blocked_dates_date', 'blocked_dates', ['date'])

    # 4. Weekly template
    op.create_table(
        'working_hours',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('day_of_week', sa.Integer(), nullable=False, unique=True),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true())
    )

    # 5. SMS audit log
    op.create_table(
        'sms_logs',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column('appointment_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('phone_number', sa.String(20), nullable=False),
        sa.Column('message_type', sa.String(30), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('twilio_sid', sa.String(), nullable=True),
        sa.Column('error_message', sa.Text(), nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_sms_logs_appointment_id', 'sms_logs', ['appointment_id'])
    op.create_index('ix_sms_logs_phone_number', 'sms_logs', ['phone_number'])
    op.create_index('ix_sms_logs_sent_at', 'sms_logs', ['sent_at'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('sms_logs')
    op.drop_table('working_hours')
    op.drop_index('ix_blocked_dates_date', table_name='blocked_dates')
    op.drop_table('blocked_dates')
    op.drop_index('ix_available_slots_date', table_name='available_slots')
    op.drop_table('available_slots')
    op.drop_index('idx_appointments_status_start', table_name='appointments')
    op.drop_table('appointments')
