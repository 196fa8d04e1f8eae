# homeserve/models/booking.py
from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Optional
from enum import Enum

class BookingStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

TERMINAL_STATUSES = frozenset({
    BookingStatus.REJECTED,
    BookingStatus.COMPLETED,
    BookingStatus.CANCELLED,
})

class Urgency(str, Enum):
    """Urgency as stored on a booking"""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"

class RequestedUrgency(str, Enum):
    """Urgency as chosen by the customer in the booking flow"""
    NORMAL = "normal"
    URGENT = "urgent"
    EMERGENCY = "emergency"

# Each requested level lands one step lower than its name suggests,
# except emergency. Existing bookings rely on this mapping.
REQUESTED_URGENCY_LEVELS = {
    RequestedUrgency.EMERGENCY: Urgency.HIGH,
    RequestedUrgency.URGENT: Urgency.NORMAL,
    RequestedUrgency.NORMAL: Urgency.LOW,
}

def stored_urgency(requested: RequestedUrgency) -> Urgency:
    return REQUESTED_URGENCY_LEVELS[RequestedUrgency(requested)]

class Coordinates(BaseModel):
    lat: float
    lng: float

class Booking(BaseModel):
    booking_id: str
    user_id: str
    provider_id: str

    service_type: str
    description: str
    preferred_date: date
    preferred_time: str
    urgency: Urgency = Urgency.NORMAL
    budget: Optional[float] = None
    address: str
    contact_phone: Optional[str] = None

    service_category: Optional[str] = None
    duration: Optional[str] = None
    duration_value: Optional[int] = None
    coordinates: Optional[Coordinates] = None
    skill_tags: Optional[List[str]] = None
    insurance_required: bool = False
    background_check_required: bool = False
    base_price: Optional[int] = None
    surge_multiplier: float = 1
    insurance_cost: int = 0

    status: BookingStatus = BookingStatus.PENDING
    version: int = 1
    accepted_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    provider_notes: Optional[str] = None
    estimated_duration: Optional[str] = None
    final_amount: Optional[int] = Field(None, ge=0)

    amount: int = Field(..., description="Quoted price in the smallest currency unit")
    currency: str = "inr"
    payment_processed_at: Optional[datetime] = None

    rating: Optional[int] = Field(None, ge=1, le=5)
    review: Optional[str] = Field(None, max_length=500)
    reviewed_at: Optional[datetime] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class BookingCreate(BaseModel):
    """Booking flow request, prices in major currency units"""
    worker_id: str = Field(..., min_length=1)
    service_type: str = Field(..., min_length=1)
    service_category: str = Field(..., min_length=1)
    duration: str = Field(..., min_length=1)
    duration_value: int = Field(..., ge=1)
    location: str = Field(..., min_length=1)
    coordinates: Coordinates
    time_slot: str = Field(..., min_length=1)
    date: date
    urgency: RequestedUrgency = RequestedUrgency.NORMAL
    skill_tags: Optional[List[str]] = None
    special_requirements: Optional[str] = None
    insurance_required: bool = False
    background_check_required: bool = False
    total_price: float = Field(..., ge=0)
    base_price: float = Field(..., ge=0)
    surge_multiplier: float = Field(..., ge=1)
    insurance_cost: float = Field(..., ge=0)

class DirectBookingCreate(BaseModel):
    """Booking request naming the provider directly, amount in the smallest unit"""
    provider_id: str = Field(..., min_length=1)
    service_type: str = Field(..., min_length=1)
    description: str = Field(..., min_length=10)
    preferred_date: date
    preferred_time: str = Field(..., min_length=1)
    urgency: Urgency = Urgency.NORMAL
    budget: Optional[float] = None
    address: str = Field(..., min_length=1)
    contact_phone: str = Field(..., min_length=1)
    amount: int = Field(5000, ge=0)
    currency: str = "usd"

class BookingCreated(BaseModel):
    booking_id: str
    message: str
    booking: Booking

class BookingAccept(BaseModel):
    provider_notes: Optional[str] = None
    estimated_duration: Optional[str] = None
    final_amount: Optional[int] = Field(None, ge=0)

class BookingReject(BaseModel):
    rejection_reason: Optional[str] = None

class BookingComplete(BaseModel):
    final_amount: Optional[int] = Field(None, ge=0)
