"""Initial booking schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

_LANGUAGE = sa.Enum("EN", "NL", "ES", name="guestlanguage")
_BOOKING_STATUS = sa.Enum(
    "PENDING", "CONFIRMED", "DECLINED", "CANCELLED", name="bookingstatus"
)
_MESSAGE_STATUS = sa.Enum("NEW", "READ", "REPLIED", name="contactmessagestatus")
_USER_ROLE = sa.Enum("ADMIN", "USER", name="userrole")
_USER_STATUS = sa.Enum("ACTIVE", "SUSPENDED", name="userstatus")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _flag(name: str) -> list[sa.Column]:
    return [
        sa.Column(name, sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(f"{name}_at", sa.DateTime(timezone=True)),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=200)),
        sa.Column("role", _USER_ROLE, nullable=False),
        sa.Column("status", _USER_STATUS, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("public_token", sa.String(length=64), nullable=False),
        sa.Column("guest_name", sa.String(length=200), nullable=False),
        sa.Column("guest_email", sa.String(length=320), nullable=False),
        sa.Column("guest_phone", sa.String(length=64), nullable=False),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("num_guests", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("message", sa.Text()),
        sa.Column("language", _LANGUAGE, nullable=False),
        sa.Column("status", _BOOKING_STATUS, nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("cleaning_fee", sa.Numeric(10, 2), nullable=False),
        sa.Column("deposit_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_notes", sa.Text()),
        *_flag("whatsapp_notified"),
        *_flag("contract_sent"),
        sa.Column("contract_file_path", sa.String(length=512)),
        sa.Column("contract_uploaded_at", sa.DateTime(timezone=True)),
        *_flag("guest_contract_signed"),
        sa.Column("guest_contract_signed_name", sa.String(length=200)),
        sa.Column("guest_signed_contract_file_path", sa.String(length=512)),
        sa.Column("guest_signed_contract_uploaded_at", sa.DateTime(timezone=True)),
        *_flag("deposit_paid"),
        *_flag("remaining_paid"),
        *_flag("contract_signed"),
        sa.Column("review_author", sa.String(length=200)),
        sa.Column("review_rating", sa.Integer()),
        sa.Column("review_text", sa.Text()),
        sa.Column("review_submitted_at", sa.DateTime(timezone=True)),
        *_timestamps(),
    )
    op.create_index(
        "ix_bookings_public_token", "bookings", ["public_token"], unique=True
    )
    op.create_index("ix_bookings_check_in", "bookings", ["check_in"])
    op.create_index("ix_bookings_check_out", "bookings", ["check_out"])
    op.create_index("ix_bookings_status", "bookings", ["status"])

    op.create_table(
        "blocked_dates",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.String(length=255)),
        *_timestamps(),
        sa.CheckConstraint("start_date <= end_date", name="ck_blocked_dates_range"),
    )

    op.create_table(
        "pricing_rules",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("price_per_night", sa.Numeric(10, 2), nullable=False),
        sa.Column("min_stay", sa.Integer()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("start_date <= end_date", name="ck_pricing_rules_range"),
    )

    op.create_table(
        "settings",
        sa.Column("key", sa.String(length=64), primary_key=True),
        sa.Column("value", sa.JSON(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "contact_messages",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("phone", sa.String(length=64)),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", _MESSAGE_STATUS, nullable=False),
        sa.Column("language", _LANGUAGE, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
        ),
        sa.Column("booking_id", sa.Uuid(as_uuid=True)),
        sa.Column("event_type", sa.String(length=120), nullable=False),
        sa.Column("description", sa.String(length=1024)),
        sa.Column("payload", sa.JSON()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_audit_events_booking_id", "audit_events", ["booking_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_events_booking_id", table_name="audit_events")
    op.drop_table("audit_events")
    op.drop_table("contact_messages")
    op.drop_table("settings")
    op.drop_table("pricing_rules")
    op.drop_table("blocked_dates")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_check_out", table_name="bookings")
    op.drop_index("ix_bookings_check_in", table_name="bookings")
    op.drop_index("ix_bookings_public_token", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("users")
    for enum in (_USER_STATUS, _USER_ROLE, _MESSAGE_STATUS, _BOOKING_STATUS, _LANGUAGE):
        enum.drop(op.get_bind(), checkfirst=True)
