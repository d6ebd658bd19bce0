"""
Textos y eventos de outbox para las notificaciones de un booking.

Cada función retorna la lista de OutboxEvent a encolar en la misma
transacción que la escritura del booking.
"""

from app.domain.constants import (
    CLICK_CUSTOMER_CONFIRMED_NOTIFICATION,
    CLICK_OPEN_DRIVER_BOOKING_REQUEST,
    CLICK_OPEN_PARTNER_BOOKING_REQUEST,
    BOOKING_INPUT_DATETIME_FORMAT,
)
from app.domain.entities.booking import Booking, DriverStatus
from app.domain.entities.notification import NotificationType
from app.domain.entities.outbox_event import OutboxEvent
from app.domain.entities.party import Car, Driver, Party


def _notification_payload(
    receiver_id: str,
    sender_id: str,
    title: str,
    body: str,
    type_: NotificationType,
    booking_id: str,
) -> dict:
    return {
        "receiver_id": receiver_id,
        "sender_id": sender_id,
        "title": title,
        "body": body,
        "is_read": False,
        "type": type_.value,
        "booking_id": booking_id,
    }


def _pair(
    booking: Booking,
    receiver: Party,
    sender_id: str,
    type_: NotificationType,
    in_app: tuple[str, str],
    push: tuple[str, str],
    click_action: str,
) -> list[OutboxEvent]:
    title, body = in_app
    push_title, push_body = push
    events = [
        OutboxEvent.in_app(
            booking.id,
            _notification_payload(receiver.id, sender_id, title, body, type_, booking.id),
        ),
        OutboxEvent.push(
            booking.id,
            tokens=list(receiver.device_tokens),
            title=push_title,
            body=push_body,
            data={"bookingId": booking.id, "click_action": click_action},
        ),
    ]
    # Mismo instante que la escritura del booking
    for event in events:
        event.created_at = booking.updated_at
    return events


def booking_created(booking: Booking, car: Car, partner: Party, sender_id: str) -> list[OutboxEvent]:
    """Aviso al partner de que un cliente reservó su auto."""
    in_app = (
        "New Booking Alert",
        f"Hi {partner.full_name}, A customer has successfully booked your car "
        f"{car.display_name}. Please check the booking details.",
    )
    push = (
        "New Car Booking Alert",
        f"Hello {partner.full_name}, a customer has successfully booked your car "
        f"{car.display_name}. Please check the booking details.",
    )
    return _pair(
        booking,
        partner,
        sender_id,
        NotificationType.PARTNER,
        in_app,
        push,
        CLICK_OPEN_PARTNER_BOOKING_REQUEST,
    )


def _customer_driver_message(booking: Booking, driver: Driver) -> tuple[str, str]:
    return (
        f"Your Booking Confirmed ,{driver.full_name} Assigned to Your Ride 🚖",
        f"Your driver, {driver.full_name}, is on the way. Pickup at "
        f"{booking.pickup_location}. Contact: {driver.phone_number}.",
    )


def driver_assigned(
    booking: Booking,
    driver: Driver,
    customer: Party,
    sender_id: str,
) -> list[OutboxEvent]:
    """Aviso al conductor asignado y al cliente: dos in-app y dos push."""
    start = booking.start_date.strftime(BOOKING_INPUT_DATETIME_FORMAT)
    driver_message = (
        "New Ride Assignment 🚗",
        f"You have been assigned to a new ride. Pickup at {booking.pickup_location} "
        f"and drop-off at {booking.dropoff_location}. Start time: {start}.",
    )
    customer_message = _customer_driver_message(booking, driver)
    return _pair(
        booking,
        driver,
        sender_id,
        NotificationType.DRIVER,
        driver_message,
        driver_message,
        CLICK_OPEN_DRIVER_BOOKING_REQUEST,
    ) + _pair(
        booking,
        customer,
        sender_id,
        NotificationType.CUSTOMER,
        customer_message,
        customer_message,
        CLICK_CUSTOMER_CONFIRMED_NOTIFICATION,
    )


def driver_status_changed(
    booking: Booking,
    driver: Driver,
    customer: Party,
    sender_id: str,
) -> list[OutboxEvent]:
    """Aviso solo al cliente cuando el conductor responde."""
    if booking.driver_status == DriverStatus.REJECTED:
        message = (
            "Your Driver Declined the Ride",
            f"{driver.full_name} is unable to take your ride from "
            f"{booking.pickup_location}. We will update you shortly.",
        )
    else:
        message = _customer_driver_message(booking, driver)
    return _pair(
        booking,
        customer,
        sender_id,
        NotificationType.CUSTOMER,
        message,
        message,
        CLICK_CUSTOMER_CONFIRMED_NOTIFICATION,
    )
