# homeserve/routes/payments.py
from datetime import datetime, timezone
from io import BytesIO
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
import asyncpg

from ..database import get_db
from ..utils.auth import get_current_user
from ..models.auth import AuthContext
from ..models.payment import (
    CommissionQuote,
    CommissionRequest,
    EarningsSummary,
    PaymentMethodsOut,
    PaymentMethodUpdate,
    PaymentProcess,
    PaymentReceipt,
    WithdrawalReceipt,
    WithdrawalRequest
)
from ..queries.booking_queries import BookingStore
from ..queries.provider_queries import ProviderStore
from ..services.earnings import EarningsService
from ..services.statements import render_csv, render_pdf

payments_router = APIRouter(prefix="/payments", tags=["Payments"])

async def get_earnings_service(conn: asyncpg.Connection = Depends(get_db)) -> EarningsService:
    return EarningsService(ProviderStore(conn), BookingStore(conn))

@payments_router.post("/payment-method")
async def update_payment_method(
    body: PaymentMethodUpdate,
    current_user: AuthContext = Depends(get_current_user),
    earnings: EarningsService = Depends(get_earnings_service)
):
    method = await earnings.set_payment_method(current_user, body)
    return {
        "message": "Payment method updated successfully",
        "payment_method": method.value
    }

@payments_router.get("/payment-methods", response_model=PaymentMethodsOut)
async def get_payment_methods(
    current_user: AuthContext = Depends(get_current_user),
    earnings: EarningsService = Depends(get_earnings_service)
):
    return await earnings.get_payment_methods(current_user)

@payments_router.post("/calculate-commission", response_model=CommissionQuote)
async def calculate_commission(
    body: CommissionRequest,
    current_user: AuthContext = Depends(get_current_user),
    earnings: EarningsService = Depends(get_earnings_service)
):
    return earnings.quote(body.booking_amount)

@payments_router.post("/process-payment")
async def process_payment(
    body: PaymentProcess,
    current_user: AuthContext = Depends(get_current_user),
    earnings: EarningsService = Depends(get_earnings_service)
):
    receipt: PaymentReceipt = await earnings.process_payment(current_user, body)
    return {
        "message": "Payment processed successfully",
        "payment_details": receipt
    }

@payments_router.post("/request-withdrawal")
async def request_withdrawal(
    body: WithdrawalRequest,
    current_user: AuthContext = Depends(get_current_user),
    earnings: EarningsService = Depends(get_earnings_service)
):
    receipt: WithdrawalReceipt = await earnings.request_withdrawal(current_user, body)
    return {
        "message": "Withdrawal request submitted successfully",
        "withdrawal_request": receipt
    }

@payments_router.get("/earnings-summary", response_model=EarningsSummary)
async def get_earnings_summary(
    current_user: AuthContext = Depends(get_current_user),
    earnings: EarningsService = Depends(get_earnings_service)
):
    return await earnings.summary(current_user)

@payments_router.get("/earnings/export/csv")
async def export_earnings_csv(
    current_user: AuthContext = Depends(get_current_user),
    earnings: EarningsService = Depends(get_earnings_service)
):
    provider = await earnings.provider_with_history(current_user)
    now = datetime.now(timezone.utc)
    content = render_csv(provider, now)
    return StreamingResponse(
        BytesIO(content.encode()),
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename=earnings_statement_{now.strftime('%Y%m%d')}.csv"
        }
    )

@payments_router.get("/earnings/export/pdf")
async def export_earnings_pdf(
    current_user: AuthContext = Depends(get_current_user),
    earnings: EarningsService = Depends(get_earnings_service)
):
    provider = await earnings.provider_with_history(current_user)
    now = datetime.now(timezone.utc)
    return StreamingResponse(
        BytesIO(render_pdf(provider, now)),
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=earnings_statement_{now.strftime('%Y%m%d')}.pdf"
        }
    )

__all__ = ["payments_router", "get_earnings_service"]
