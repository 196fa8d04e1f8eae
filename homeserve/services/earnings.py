# homeserve/services/earnings.py
import logging
import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..config import settings
from ..exceptions import InvalidTransition, NotFoundOrForbidden, ValidationError
from ..models.auth import AuthContext
from ..models.booking import BookingStatus
from ..models.payment import (
    CommissionBreakdown,
    CommissionQuote,
    ConfiguredPaymentMethods,
    EarningsSummary,
    MaskedBankDetails,
    PaymentMethodsOut,
    PaymentMethodUpdate,
    PaymentProcess,
    PaymentReceipt,
    WithdrawalReceipt,
    WithdrawalRequest,
)
from ..models.provider import (
    BankDetails,
    PayoutMethod,
    Provider,
    WithdrawalEntry,
    WithdrawalStatus,
)
from .commission import commission_percentage, split_payment

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS = 10


def transaction_id(prefix: str) -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{prefix}-{int(time.time() * 1000)}-{suffix}"


def mask_account_number(account_number: Optional[str]) -> Optional[str]:
    if not account_number:
        return account_number
    visible = account_number[-4:]
    return "".join("*" if ch.isdigit() else ch for ch in account_number[:-4]) + visible


class EarningsService:
    """Commission split, payouts and the provider earnings ledger"""

    def __init__(self, providers, bookings):
        self.providers = providers
        self.bookings = bookings

    def quote(self, amount: float) -> CommissionQuote:
        if not amount or amount <= 0:
            raise ValidationError("Invalid booking amount", details={"booking_amount": amount})

        commission, earnings = split_payment(amount)
        return CommissionQuote(
            booking_amount=amount,
            commission=commission,
            provider_earnings=earnings,
            commission_rate=settings.commission_rate,
            breakdown=CommissionBreakdown(
                platform_commission=commission,
                provider_earnings=earnings,
                percentage=commission_percentage()
            )
        )

    async def process_payment(self, actor: AuthContext, data: PaymentProcess) -> PaymentReceipt:
        if not data.booking_id or not data.work_completed:
            raise ValidationError(
                "Missing required fields",
                details={"booking_id": data.booking_id, "work_completed": data.work_completed}
            )

        provider = await self._provider(actor)
        row = await self.bookings.find_one(booking_id=data.booking_id, provider_id=provider["provider_id"])
        if row is None:
            raise NotFoundOrForbidden()
        if row["status"] != BookingStatus.COMPLETED.value:
            raise InvalidTransition("Booking must be completed before payment", current_status=row["status"])

        amount = data.booking_amount
        if amount is None:
            final_amount = row.get("final_amount")
            amount = (final_amount if final_amount is not None else row["amount"]) / 100
        if amount <= 0:
            raise ValidationError("Invalid booking amount", details={"booking_amount": amount})

        commission, earnings = split_payment(amount)

        # Both stores share the request connection, so one transaction covers all three writes
        async with self.bookings.transaction():
            # Credit each booking once
            marked = await self.bookings.update_where(
                data.booking_id,
                {
                    "provider_id": provider["provider_id"],
                    "status": BookingStatus.COMPLETED.value,
                    "payment_processed_at": None,
                },
                {"payment_processed_at": _utcnow()}
            )
            if marked is None:
                raise InvalidTransition(
                    "Payment already processed for this booking",
                    current_status=row["status"]
                )

            await self.providers.credit_earnings(provider["provider_id"], earnings, commission)
            entry = await self.providers.append_withdrawal(provider["provider_id"], {
                "amount": earnings,
                "date": _utcnow(),
                "status": WithdrawalStatus.COMPLETED.value,
                "transaction_id": transaction_id("TXN"),
            })

        logger.info(
            f"Processed payment for booking {data.booking_id}: "
            f"amount={amount} commission={commission} earnings={earnings}"
        )

        return PaymentReceipt(
            booking_id=data.booking_id,
            total_amount=amount,
            commission=commission,
            provider_earnings=earnings,
            transaction_id=entry["transaction_id"],
            status=WithdrawalStatus.COMPLETED
        )

    async def request_withdrawal(self, actor: AuthContext, data: WithdrawalRequest) -> WithdrawalReceipt:
        amount = data.amount
        if not amount or amount <= 0:
            raise ValidationError("Invalid withdrawal amount", details={"amount": amount})

        minimum = settings.minimum_withdrawal
        if amount < minimum:
            raise ValidationError(
                f"Minimum withdrawal amount is {minimum:g}",
                details={"minimum_withdrawal": minimum, "requested_amount": amount}
            )

        provider = await self._provider_model(actor)
        available = provider.available_balance
        if amount > available:
            raise ValidationError(
                "Insufficient balance",
                details={"available_balance": available, "requested_amount": amount}
            )

        if data.payment_method == PayoutMethod.BANK and not (
            provider.bank_details and provider.bank_details.account_number
        ):
            raise ValidationError("Bank details not configured", details={"payment_method": "bank"})
        if data.payment_method == PayoutMethod.UPI and not provider.upi_id:
            raise ValidationError("UPI ID not configured", details={"payment_method": "upi"})

        entry = await self.providers.append_withdrawal(provider.provider_id, {
            "amount": amount,
            "date": _utcnow(),
            "status": WithdrawalStatus.PENDING.value,
            "transaction_id": transaction_id("WD"),
            "payment_method": data.payment_method.value,
        })
        logger.info(f"Provider {provider.provider_id} requested withdrawal of {amount} via {data.payment_method.value}")

        return WithdrawalReceipt(
            transaction_id=entry["transaction_id"],
            amount=amount,
            status=WithdrawalStatus.PENDING
        )

    async def set_payment_method(self, actor: AuthContext, data: PaymentMethodUpdate) -> PayoutMethod:
        provider = await self._provider(actor)
        details = data.details or {}

        if data.method == PayoutMethod.BANK.value:
            missing = [
                field for field in ("account_number", "ifsc_code", "account_holder_name")
                if not details.get(field)
            ]
            if missing:
                raise ValidationError("Bank details incomplete", details={"missing": missing})
            bank = BankDetails(
                account_number=details["account_number"],
                ifsc_code=details["ifsc_code"],
                account_holder_name=details["account_holder_name"],
                bank_name=details.get("bank_name") or ""
            )
            await self.providers.update(provider["provider_id"], {"bank_details": bank.model_dump()})
        elif data.method == PayoutMethod.UPI.value:
            upi_id = details.get("upi_id")
            if not upi_id:
                raise ValidationError("UPI ID is required", details={"missing": ["upi_id"]})
            if "@" not in upi_id:
                raise ValidationError("Invalid UPI ID format", details={"upi_id": upi_id})
            await self.providers.update(provider["provider_id"], {"upi_id": upi_id})
        else:
            raise ValidationError("Invalid payment method", details={"method": data.method})

        logger.info(f"Provider {provider['provider_id']} updated {data.method} payout details")
        return PayoutMethod(data.method)

    async def get_payment_methods(self, actor: AuthContext) -> PaymentMethodsOut:
        provider = await self._provider_model(actor)
        bank = None
        if provider.bank_details:
            bank = MaskedBankDetails(
                account_number=mask_account_number(provider.bank_details.account_number),
                ifsc_code=provider.bank_details.ifsc_code,
                account_holder_name=provider.bank_details.account_holder_name,
                bank_name=provider.bank_details.bank_name
            )
        return PaymentMethodsOut(bank=bank, upi=provider.upi_id or None)

    async def summary(self, actor: AuthContext, now: Optional[datetime] = None) -> EarningsSummary:
        provider = await self._provider_model(actor)
        return build_summary(provider, now or _utcnow())

    async def provider_with_history(self, actor: AuthContext) -> Provider:
        return await self._provider_model(actor)

    async def _provider(self, actor: AuthContext) -> Dict[str, Any]:
        provider = await self.providers.find_by_user(actor.user_id)
        if provider is None:
            raise NotFoundOrForbidden("Provider profile not found")
        return provider

    async def _provider_model(self, actor: AuthContext) -> Provider:
        row = await self._provider(actor)
        history = await self.providers.withdrawal_history(row["provider_id"])
        return Provider(**{**row, "withdrawal_history": history})


def build_summary(provider: Provider, now: datetime) -> EarningsSummary:
    total = provider.total_earnings or 0
    fees = provider.platform_fees or 0
    net = total - fees

    month_start = _aware(now).replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    this_month = sum(
        entry.amount for entry in provider.withdrawal_history
        if entry.status == WithdrawalStatus.COMPLETED and _aware(entry.date) >= month_start
    )

    recent: List[WithdrawalEntry] = sorted(
        provider.withdrawal_history, key=lambda entry: _aware(entry.date), reverse=True
    )[:RECENT_TRANSACTIONS]

    completed = provider.completed_bookings or 0
    return EarningsSummary(
        total_earnings=total,
        platform_fees=fees,
        net_earnings=net,
        this_month_earnings=round(this_month, 2),
        completed_bookings=completed,
        average_earnings_per_booking=round(net / completed, 2) if completed > 0 else 0,
        recent_transactions=recent,
        payment_methods=ConfiguredPaymentMethods(
            bank=bool(provider.bank_details and provider.bank_details.account_number),
            upi=bool(provider.upi_id)
        )
    )


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
