# homeserve/services/__init__.py
from .booking_workflow import BookingWorkflow
from .commission import calculate_commission, split_payment
from .earnings import EarningsService
from .notifier import BookingNotifier, DatabaseNotifier
from .ratings import recompute_provider_rating

__all__ = [
    "BookingWorkflow",
    "calculate_commission",
    "split_payment",
    "EarningsService",
    "BookingNotifier",
    "DatabaseNotifier",
    "recompute_provider_rating"
]
