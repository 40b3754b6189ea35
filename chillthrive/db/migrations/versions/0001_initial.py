from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("short_description", sa.String(length=255)),
        sa.Column("description", sa.Text()),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), server_default="60"),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("is_combo", sa.Boolean(), server_default=sa.false()),
        sa.Column("display_order", sa.Integer(), server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("price > 0", name="ck_service_price_positive"),
    )

    op.create_table(
        "time_slots",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("slot_time", sa.String(length=32), nullable=False, unique=True),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("capacity > 0", name="ck_time_slot_capacity_positive"),
    )

    op.create_table(
        "blocked_dates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("blocked_date", sa.Date(), nullable=False, unique=True),
        sa.Column("reason", sa.String(length=255)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_blocked_dates_blocked_date", "blocked_dates", ["blocked_date"])

    booking_status = postgresql.ENUM(
        "pending", "confirmed", "completed", "cancelled", name="bookingstatus", create_type=False
    )
    booking_status.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("service_id", sa.Integer(), sa.ForeignKey("services.id", ondelete="SET NULL")),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("customer_email", sa.String(length=255), nullable=False),
        sa.Column("customer_phone", sa.String(length=32), nullable=False),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("time_slot", sa.String(length=32), nullable=False),
        sa.Column("status", booking_status, server_default="pending"),
        sa.Column("payment_status", sa.String(length=32)),
        sa.Column("payment_id", sa.String(length=128)),
        sa.Column("payment_amount", sa.Integer()),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("cancelled_by", sa.String(length=64)),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_booking_date_slot", "bookings", ["booking_date", "time_slot"])

    op.create_table(
        "slot_occupancy",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("time_slot", sa.String(length=32), nullable=False),
        sa.Column("booked", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("booking_date", "time_slot", name="uq_slot_occupancy_key"),
        sa.CheckConstraint("booked >= 0", name="ck_slot_occupancy_booked_non_negative"),
    )

    notification_kind = postgresql.ENUM(
        "received", "confirmed", "completed", name="notificationkind", create_type=False
    )
    notification_kind.create(op.get_bind(), checkfirst=True)
    outbox_status = postgresql.ENUM("pending", "sent", "failed", name="outboxstatus", create_type=False)
    outbox_status.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "notification_outbox",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("booking_id", sa.Integer(), sa.ForeignKey("bookings.id", ondelete="SET NULL")),
        sa.Column("kind", notification_kind, nullable=False),
        sa.Column("payload", sa.JSON(), nullable=False),
        sa.Column("status", outbox_status, server_default="pending"),
        sa.Column("attempts", sa.Integer(), server_default="0"),
        sa.Column("last_error", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("sent_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_notification_outbox_status", "notification_outbox", ["status"])


def downgrade() -> None:
    op.drop_index("ix_notification_outbox_status", table_name="notification_outbox")
    op.drop_table("notification_outbox")
    op.drop_table("slot_occupancy")
    op.drop_index("ix_booking_date_slot", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_blocked_dates_blocked_date", table_name="blocked_dates")
    op.drop_table("blocked_dates")
    op.drop_table("time_slots")
    op.drop_table("services")
    for enum_name in ("outboxstatus", "notificationkind", "bookingstatus"):
        postgresql.ENUM(name=enum_name).drop(op.get_bind(), checkfirst=True)
