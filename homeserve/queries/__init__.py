# homeserve/queries/__init__.py
from .booking_queries import BookingStore
from .provider_queries import ProviderStore
from .notification_queries import (
    create_notification,
    get_notifications,
    count_unread,
    mark_read
)

__all__ = [
    'BookingStore',
    'ProviderStore',

    # Notification queries
    'create_notification',
    'get_notifications',
    'count_unread',
    'mark_read'
]
