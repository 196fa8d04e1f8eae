# homeserve/models/payment.py
from typing import Any, Dict, List, Optional
from pydantic import BaseModel
from .provider import PayoutMethod, WithdrawalEntry, WithdrawalStatus

class CommissionRequest(BaseModel):
    booking_amount: float

class CommissionBreakdown(BaseModel):
    platform_commission: float
    provider_earnings: float
    percentage: str

class CommissionQuote(BaseModel):
    booking_amount: float
    commission: float
    provider_earnings: float
    commission_rate: float
    breakdown: CommissionBreakdown

class PaymentProcess(BaseModel):
    booking_id: str
    booking_amount: Optional[float] = None
    work_completed: bool = False

class PaymentReceipt(BaseModel):
    booking_id: str
    total_amount: float
    commission: float
    provider_earnings: float
    transaction_id: str
    status: WithdrawalStatus

class WithdrawalRequest(BaseModel):
    amount: float
    payment_method: PayoutMethod

class WithdrawalReceipt(BaseModel):
    transaction_id: str
    amount: float
    status: WithdrawalStatus
    estimated_processing_time: str = "2-3 business days"

class PaymentMethodUpdate(BaseModel):
    method: str
    details: Dict[str, Any] = {}

class MaskedBankDetails(BaseModel):
    account_number: Optional[str]
    ifsc_code: str
    account_holder_name: str
    bank_name: str

class PaymentMethodsOut(BaseModel):
    bank: Optional[MaskedBankDetails] = None
    upi: Optional[str] = None

class ConfiguredPaymentMethods(BaseModel):
    bank: bool
    upi: bool

class EarningsSummary(BaseModel):
    total_earnings: float
    platform_fees: float
    net_earnings: float
    this_month_earnings: float
    completed_bookings: int
    average_earnings_per_booking: float
    recent_transactions: List[WithdrawalEntry]
    payment_methods: ConfiguredPaymentMethods
