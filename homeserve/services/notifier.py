# homeserve/services/notifier.py
from typing import Any, Dict, Protocol
import asyncpg

from ..models.notification import BookingEvent
from ..queries.notification_queries import create_notification


class BookingNotifier(Protocol):
    async def notify_new_booking(self, recipient_user_id: str, booking: Dict[str, Any]) -> None:
        ...

    async def notify_booking_status_change(
        self,
        customer_user_id: str,
        provider_user_id: str,
        booking: Dict[str, Any],
        event: BookingEvent
    ) -> None:
        ...


CUSTOMER_MESSAGES = {
    BookingEvent.ACCEPTED: "Your {service_type} booking has been accepted",
    BookingEvent.REJECTED: "Your {service_type} booking was declined",
    BookingEvent.STARTED: "Work on your {service_type} booking has started",
    BookingEvent.COMPLETED: "Your {service_type} booking has been completed",
}

PROVIDER_MESSAGES = {
    BookingEvent.ACCEPTED: "You accepted a {service_type} booking",
    BookingEvent.REJECTED: "You declined a {service_type} booking",
    BookingEvent.STARTED: "You started work on a {service_type} booking",
    BookingEvent.COMPLETED: "You completed a {service_type} booking",
}


class DatabaseNotifier:
    """Writes booking notifications to the in-app inbox"""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def notify_new_booking(self, recipient_user_id: str, booking: Dict[str, Any]) -> None:
        await create_notification(
            self.conn,
            recipient_user_id,
            f"New booking request for {booking['service_type']} at {booking.get('address', '')}",
            {"event": "new_booking", **booking}
        )

    async def notify_booking_status_change(
        self,
        customer_user_id: str,
        provider_user_id: str,
        booking: Dict[str, Any],
        event: BookingEvent
    ) -> None:
        payload = {"event": event.value, **booking}
        await create_notification(
            self.conn,
            customer_user_id,
            CUSTOMER_MESSAGES[event].format(service_type=booking["service_type"]),
            payload
        )
        await create_notification(
            self.conn,
            provider_user_id,
            PROVIDER_MESSAGES[event].format(service_type=booking["service_type"]),
            payload
        )
