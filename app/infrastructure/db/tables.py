from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

metadata = MetaData()


def _party_table(name: str) -> Table:
    return Table(
        name,
        metadata,
        Column("id", String(64), primary_key=True),
        Column("full_name", String(255), nullable=False),
        Column("phone_number", String(50)),
        Column("email", String(255)),
        Column("img_url", String(500)),
        Column("device_tokens", JSON, nullable=False, default=list),
        Column("created_at", DateTime),
    )


customers = _party_table("customers")
partners = _party_table("partners")
drivers = _party_table("drivers")

cars = Table(
    "cars",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("partner_id", String(64), nullable=False, index=True),
    Column("brand", String(100), nullable=False),
    Column("model", String(100), nullable=False),
    Column("price_per_day", Float, nullable=False, default=0),
    Column("registration_number", String(50)),
    Column("pickup_location", String(255)),
    Column("dropoff_location", String(255)),
    Column("created_at", DateTime),
)

bookings = Table(
    "bookings",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("customer_id", String(64), nullable=False),
    Column("car_id", String(64), nullable=False),
    Column("partner_id", String(64), nullable=False, index=True),
    Column("driver_id", String(64), index=True),
    Column("pickup_location", String(255), nullable=False),
    Column("dropoff_location", String(255), nullable=False),
    Column("start_date", DateTime, nullable=False),
    Column("end_date", DateTime, nullable=False),
    Column("duration_in_days", Integer, nullable=False),
    Column("total_amount", Float, nullable=False),
    Column("penalties", Float, nullable=False, default=0),
    Column("status", String(16), nullable=False, default="pending"),
    Column("payment_status", String(16), nullable=False, default="pending"),
    Column("partner_status", String(16), nullable=False, default="pending"),
    Column("driver_status", String(16), nullable=False, default="pending"),
    Column("driver_rejection_reason", Text),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
    Index("ix_bookings_customer_id", "customer_id"),
    Index("ix_bookings_car_id", "car_id"),
    Index("ix_bookings_start_date", "start_date"),
)

notifications = Table(
    "notifications",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("receiver_id", String(64), nullable=False, index=True),
    Column("sender_id", String(64), nullable=False),
    Column("title", String(255), nullable=False),
    Column("body", Text, nullable=False),
    Column("type", String(16), nullable=False),
    Column("booking_id", String(64)),
    Column("is_read", Boolean, nullable=False, default=False),
    Column("created_at", DateTime),
)

outbox_events = Table(
    "outbox_events",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("event_type", String(64), nullable=False),
    Column("aggregate_type", String(32), nullable=False),
    Column("aggregate_code", String(64)),
    Column("payload", JSON, nullable=False),
    Column("status", String(16), nullable=False, default="NEW"),
    Column("attempts", Integer, nullable=False, default=0),
    Column("next_attempt_at", DateTime),
    Column("locked_by", String(64)),
    Column("lock_expires_at", DateTime),
    Column("error_code", String(64)),
    Column("error_message", Text),
    Column("created_at", DateTime),
    Column("updated_at", DateTime),
    Index("ix_outbox_events_status_next_attempt", "status", "next_attempt_at"),
)

# Fila de bloqueo por cliente: existe aunque el cliente no tenga fila en customers
customer_booking_locks = Table(
    "customer_booking_locks",
    metadata,
    Column("customer_id", String(64), primary_key=True),
)
