# homeserve/models/__init__.py
from .auth import TokenData, AuthContext, UserRole
from .booking import (
    BookingStatus,
    Urgency,
    RequestedUrgency,
    stored_urgency,
    Coordinates,
    Booking,
    BookingCreate,
    DirectBookingCreate,
    BookingCreated,
    BookingAccept,
    BookingReject,
    BookingComplete
)
from .provider import PayoutMethod, WithdrawalStatus, BankDetails, WithdrawalEntry, Provider
from .payment import (
    CommissionQuote,
    PaymentProcess,
    PaymentReceipt,
    WithdrawalRequest,
    WithdrawalReceipt,
    PaymentMethodUpdate,
    PaymentMethodsOut,
    EarningsSummary
)
from .review import ReviewCreate
from .notification import BookingEvent, NotificationOut

__all__ = [
    'TokenData', 'AuthContext', 'UserRole',
    'BookingStatus', 'Urgency', 'RequestedUrgency', 'stored_urgency', 'Coordinates',
    'Booking', 'BookingCreate', 'DirectBookingCreate', 'BookingCreated',
    'BookingAccept', 'BookingReject', 'BookingComplete',
    'PayoutMethod', 'WithdrawalStatus', 'BankDetails', 'WithdrawalEntry', 'Provider',
    'CommissionQuote', 'PaymentProcess', 'PaymentReceipt', 'WithdrawalRequest',
    'WithdrawalReceipt', 'PaymentMethodUpdate', 'PaymentMethodsOut', 'EarningsSummary',
    'ReviewCreate',
    'BookingEvent', 'NotificationOut'
]
