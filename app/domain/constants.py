"""Constantes del dominio de bookings."""

BOOKING_STATUS_PENDING = "pending"
BOOKING_STATUS_ONGOING = "ongoing"
BOOKING_STATUS_BOOKED = "booked"
BOOKING_STATUS_COMPLETED = "completed"
BOOKING_STATUS_CANCELLED = "cancelled"

PAYMENT_STATUS_PENDING = "pending"
PAYMENT_STATUS_COMPLETED = "completed"
PAYMENT_STATUS_REFUNDED = "refunded"

PARTNER_STATUS_PENDING = "pending"
PARTNER_STATUS_CONFIRMED = "confirmed"
PARTNER_STATUS_REJECTED = "rejected"

DRIVER_STATUS_PENDING = "pending"
DRIVER_STATUS_ACCEPTED = "accepted"
DRIVER_STATUS_REJECTED = "rejected"

# Formato de fecha/hora aceptado al crear un booking (no ISO-8601)
BOOKING_INPUT_DATETIME_FORMAT = "%d/%m/%Y %H:%M"

# Outbox de notificaciones
EVENT_NOTIFY_IN_APP = "NOTIFY_IN_APP"
EVENT_NOTIFY_PUSH = "NOTIFY_PUSH"
AGGREGATE_BOOKING = "booking"

# click_action enviados en el payload de push
CLICK_OPEN_PARTNER_BOOKING_REQUEST = "OPEN_PARTNER_BOOKING_REQUEST"
CLICK_OPEN_DRIVER_BOOKING_REQUEST = "OPEN_DRIVER_BOOKING_REQUEST"
CLICK_CUSTOMER_CONFIRMED_NOTIFICATION = "CUSTOMER_CONFIRMED_NOTIFICATION"
