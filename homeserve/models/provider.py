# homeserve/models/provider.py
from pydantic import BaseModel
from datetime import datetime
from typing import List, Optional
from enum import Enum

class PayoutMethod(str, Enum):
    BANK = "bank"
    UPI = "upi"

class WithdrawalStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

class BankDetails(BaseModel):
    account_number: str
    ifsc_code: str
    account_holder_name: str
    bank_name: str = ""

class WithdrawalEntry(BaseModel):
    amount: float
    date: datetime
    status: WithdrawalStatus
    transaction_id: str
    payment_method: Optional[PayoutMethod] = None

class Provider(BaseModel):
    provider_id: str
    user_id: str
    category: Optional[str] = None
    description: Optional[str] = None
    verified: bool = False
    available: bool = True
    rating: Optional[float] = None
    total_earnings: float = 0
    platform_fees: float = 0
    completed_bookings: int = 0
    bank_details: Optional[BankDetails] = None
    upi_id: Optional[str] = None
    withdrawal_history: List[WithdrawalEntry] = []

    @property
    def available_balance(self) -> float:
        return self.total_earnings - self.platform_fees
