# homeserve/routes/__init__.py
from .bookings import bookings_router
from .payments import payments_router
from .notifications import notifications_router

routers = [
    bookings_router,
    payments_router,
    notifications_router
]

__all__ = ["routers"]
