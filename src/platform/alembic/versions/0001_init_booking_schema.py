"""init_booking_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Schema:
- trip: scheduled departures with route, vehicle and per-seat price (minor units)
- seat: one row per (trip, position); the seat ledger
- seat_audit: append-only record of every seat transition
- hold: time-boxed claims on seats
- checkout_session: one passenger purchase flow
- identity / verification_attempt / verification_grant: one-time code verification
- payment_intent: provider references issued for a checkout
- booking: settled purchases
- escalation: payments that need an operator
- operator: console accounts
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.DateTime(timezone=True), nullable=nullable)


def upgrade() -> None:
    # ========== Trip catalog ==========
    op.create_table(
        'trip',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trip_code', sa.String(length=40), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('pickup_city', sa.String(length=100), nullable=False),
        sa.Column('pickup_terminal', sa.String(length=255), nullable=False),
        sa.Column('dropoff_city', sa.String(length=100), nullable=False),
        sa.Column('dropoff_terminal', sa.String(length=255), nullable=False),
        sa.Column('departure_date', sa.Date(), nullable=False),
        sa.Column('departure_time', sa.Time(), nullable=False),
        sa.Column('arrival_time', sa.Time(), nullable=True),
        sa.Column('unit_price', sa.Integer(), nullable=False),
        sa.Column('vehicle_type', sa.String(length=50), nullable=False),
        sa.Column('bus', sa.String(length=100), nullable=False),
        sa.Column('seat_count', sa.Integer(), nullable=False),
        sa.Column('is_hire_only', sa.Boolean(), nullable=False),
        _timestamp('first_hold_at', nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('trip_code'),
    )
    op.create_index(
        'ix_trip_route_date', 'trip', ['pickup_city', 'dropoff_city', 'departure_date']
    )

    # ========== Seat ledger ==========
    op.create_table(
        'seat',
        sa.Column('trip_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('state', sa.String(length=10), nullable=False),
        sa.Column('holder_hold_id', sa.String(length=36), nullable=True),
        sa.Column('booking_id', sa.String(length=36), nullable=True),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('trip_id', 'position'),
    )
    op.create_index('ix_seat_trip_state', 'seat', ['trip_id', 'state'])

    op.create_table(
        'seat_audit',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('trip_id', sa.Integer(), nullable=False),
        sa.Column('positions', sa.JSON(), nullable=False),
        sa.Column('from_state', sa.String(length=10), nullable=False),
        sa.Column('to_state', sa.String(length=10), nullable=False),
        sa.Column('actor', sa.String(length=100), nullable=False),
        sa.Column('reason', sa.String(length=255), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_seat_audit_trip_id'), 'seat_audit', ['trip_id'])

    op.create_table(
        'hold',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('trip_id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.String(length=36), nullable=False),
        sa.Column('positions', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        _timestamp('expires_at'),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_hold_trip_id'), 'hold', ['trip_id'])
    op.create_index(op.f('ix_hold_session_id'), 'hold', ['session_id'])
    op.create_index('ix_hold_status_expires_at', 'hold', ['status', 'expires_at'])

    # ========== Checkout ==========
    op.create_table(
        'checkout_session',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('trip_id', sa.Integer(), nullable=False),
        sa.Column('mode', sa.String(length=10), nullable=False),
        sa.Column('requested_positions', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('hold_id', sa.String(length=36), nullable=True),
        sa.Column('identity_id', sa.String(length=36), nullable=True),
        sa.Column('total_amount', sa.Integer(), nullable=False),
        sa.Column('payment_reference', sa.String(length=64), nullable=True),
        sa.Column('authorization_url', sa.String(length=500), nullable=True),
        sa.Column('abandon_reason', sa.String(length=255), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_checkout_session_trip_id'), 'checkout_session', ['trip_id'])
    op.create_index(op.f('ix_checkout_session_hold_id'), 'checkout_session', ['hold_id'])

    op.create_table(
        'identity',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('contact', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        _timestamp('verified_at', nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('contact'),
    )

    op.create_table(
        'verification_attempt',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('contact', sa.String(length=255), nullable=False),
        sa.Column('identity_id', sa.String(length=36), nullable=False),
        sa.Column('code_hash', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        _timestamp('expires_at'),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_verification_attempt_contact_status', 'verification_attempt', ['contact', 'status']
    )

    op.create_table(
        'verification_grant',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('identity_id', sa.String(length=36), nullable=False),
        sa.Column('attempt_id', sa.String(length=36), nullable=False),
        _timestamp('expires_at'),
        _timestamp('consumed_at', nullable=True),
        sa.Column('consumed_by_session_id', sa.String(length=36), nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        op.f('ix_verification_grant_identity_id'), 'verification_grant', ['identity_id']
    )

    # ========== Payments ==========
    op.create_table(
        'payment_intent',
        sa.Column('reference', sa.String(length=64), nullable=False),
        sa.Column('session_id', sa.String(length=36), nullable=False),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('authorization_url', sa.String(length=500), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('reference'),
    )
    op.create_index(op.f('ix_payment_intent_session_id'), 'payment_intent', ['session_id'])

    op.create_table(
        'booking',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('trip_id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.String(length=36), nullable=False),
        sa.Column('identity_id', sa.String(length=36), nullable=True),
        sa.Column('seat_positions', sa.JSON(), nullable=False),
        sa.Column('amount_paid', sa.Integer(), nullable=False),
        sa.Column('payment_reference', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        _timestamp('created_at'),
        _timestamp('cancelled_at', nullable=True),
        sa.Column('cancelled_by', sa.String(length=255), nullable=True),
        sa.Column('cancel_reason', sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('session_id'),
        sa.UniqueConstraint('payment_reference'),
    )
    op.create_index(op.f('ix_booking_trip_id'), 'booking', ['trip_id'])
    op.create_index(op.f('ix_booking_identity_id'), 'booking', ['identity_id'])

    op.create_table(
        'escalation',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('kind', sa.String(length=40), nullable=False),
        sa.Column('payment_reference', sa.String(length=64), nullable=False),
        sa.Column('session_id', sa.String(length=36), nullable=True),
        sa.Column('amount', sa.Integer(), nullable=False),
        sa.Column('detail', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        _timestamp('created_at'),
        _timestamp('resolved_at', nullable=True),
        sa.Column('resolved_by', sa.String(length=255), nullable=True),
        sa.Column('resolution_note', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('payment_reference', 'kind', name='uq_escalation_reference_kind'),
    )
    op.create_index(op.f('ix_escalation_status'), 'escalation', ['status'])

    # ========== Operator console ==========
    op.create_table(
        'operator',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=1024), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_operator_email'), 'operator', ['email'], unique=True)


def downgrade() -> None:
    for table in (
        'operator',
        'escalation',
        'booking',
        'payment_intent',
        'verification_grant',
        'verification_attempt',
        'identity',
        'checkout_session',
        'hold',
        'seat_audit',
        'seat',
        'trip',
    ):
        op.drop_table(table)
