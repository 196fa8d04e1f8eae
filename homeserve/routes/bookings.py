# homeserve/routes/bookings.py
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
import asyncpg

from ..database import get_db
from ..utils.auth import get_current_user, require_role
from ..models.auth import AuthContext, UserRole
from ..models.booking import (
    Booking,
    BookingAccept,
    BookingComplete,
    BookingCreate,
    BookingCreated,
    BookingReject,
    BookingStatus,
    DirectBookingCreate
)
from ..models.review import ReviewCreate
from ..queries.booking_queries import BookingStore
from ..queries.provider_queries import ProviderStore
from ..services.booking_workflow import BookingWorkflow
from ..services.notifier import DatabaseNotifier

bookings_router = APIRouter(prefix="/bookings", tags=["Bookings"])

customer_only = require_role(UserRole.USER)
provider_only = require_role(UserRole.PROVIDER)

async def get_booking_workflow(conn: asyncpg.Connection = Depends(get_db)) -> BookingWorkflow:
    return BookingWorkflow(BookingStore(conn), ProviderStore(conn), DatabaseNotifier(conn))

@bookings_router.post("/create", response_model=BookingCreated, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking: BookingCreate,
    current_user: AuthContext = Depends(customer_only),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    created = await workflow.create(current_user, booking)
    return BookingCreated(
        booking_id=created.booking_id,
        message="Booking created successfully",
        booking=created
    )

@bookings_router.post("/", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create_direct_booking(
    booking: DirectBookingCreate,
    current_user: AuthContext = Depends(customer_only),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    return await workflow.create_direct(current_user, booking)

@bookings_router.get("/me", response_model=List[Booking])
async def get_my_bookings(
    status: Optional[BookingStatus] = None,
    limit: int = Query(100, ge=1, le=500),
    current_user: AuthContext = Depends(customer_only),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    return await workflow.list_for_user(current_user, status, limit)

@bookings_router.get("/provider/me", response_model=List[Booking])
async def get_provider_bookings(
    status: Optional[BookingStatus] = None,
    limit: int = Query(100, ge=1, le=500),
    current_user: AuthContext = Depends(provider_only),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    return await workflow.list_for_provider(current_user, status, limit)

@bookings_router.patch("/{booking_id}/accept", response_model=Booking)
async def accept_booking(
    booking_id: str,
    body: Optional[BookingAccept] = None,
    current_user: AuthContext = Depends(provider_only),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    return await workflow.accept(current_user, booking_id, body or BookingAccept())

@bookings_router.patch("/{booking_id}/reject", response_model=Booking)
async def reject_booking(
    booking_id: str,
    body: Optional[BookingReject] = None,
    current_user: AuthContext = Depends(provider_only),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    return await workflow.reject(current_user, booking_id, body or BookingReject())

@bookings_router.patch("/{booking_id}/start", response_model=Booking)
async def start_booking(
    booking_id: str,
    current_user: AuthContext = Depends(provider_only),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    return await workflow.start(current_user, booking_id)

@bookings_router.patch("/{booking_id}/complete", response_model=Booking)
async def complete_booking(
    booking_id: str,
    body: Optional[BookingComplete] = None,
    current_user: AuthContext = Depends(provider_only),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    return await workflow.complete(current_user, booking_id, body or BookingComplete())

@bookings_router.patch("/{booking_id}/review", response_model=Booking)
async def review_booking(
    booking_id: str,
    body: ReviewCreate,
    current_user: AuthContext = Depends(customer_only),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    return await workflow.review(current_user, booking_id, body)

@bookings_router.patch("/{booking_id}/cancel", response_model=Booking)
async def cancel_booking(
    booking_id: str,
    current_user: AuthContext = Depends(customer_only),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    return await workflow.cancel(current_user, booking_id)

@bookings_router.get("/{booking_id}", response_model=Booking)
async def get_booking_by_id(
    booking_id: str,
    current_user: AuthContext = Depends(get_current_user),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    return await workflow.get(current_user, booking_id)

__all__ = ["bookings_router", "get_booking_workflow"]
