# homeserve/services/booking_workflow.py
"""
Booking lifecycle.

    pending -> accepted -> in_progress -> completed
    pending -> rejected
    pending -> cancelled

Every transition is a single conditional update keyed on the booking id,
the owner, the expected status and the version that was read. A booking
that changed in between is reported as an invalid transition instead of
being overwritten.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from ..config import settings
from ..exceptions import (
    DependencyUnavailable,
    InvalidTransition,
    NotFoundOrForbidden,
    ValidationError,
)
from ..models.auth import AuthContext, UserRole
from ..models.booking import (
    Booking,
    BookingAccept,
    BookingComplete,
    BookingCreate,
    BookingReject,
    BookingStatus,
    DirectBookingCreate,
    stored_urgency,
)
from ..models.notification import BookingEvent
from ..models.review import ReviewCreate
from .notifier import BookingNotifier
from .ratings import recompute_provider_rating

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: frozenset({
        BookingStatus.ACCEPTED,
        BookingStatus.REJECTED,
        BookingStatus.CANCELLED,
    }),
    BookingStatus.ACCEPTED: frozenset({BookingStatus.IN_PROGRESS}),
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED}),
    BookingStatus.REJECTED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
}


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[BookingStatus(current)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BookingWorkflow:
    def __init__(self, bookings, providers, notifier: BookingNotifier):
        self.bookings = bookings
        self.providers = providers
        self.notifier = notifier

    # Creation

    async def create(self, actor: AuthContext, data: BookingCreate) -> Booking:
        provider = await self._bookable_provider(data.worker_id, "Worker")
        description = data.special_requirements or f"{data.service_category} service"
        urgency = stored_urgency(data.urgency)

        row = await self.bookings.insert({
            "user_id": actor.user_id,
            "provider_id": provider["provider_id"],
            "service_type": data.service_type,
            "description": description,
            "preferred_date": data.date,
            "preferred_time": data.time_slot,
            "urgency": urgency.value,
            "address": data.location,
            "amount": _minor_units(data.total_price),
            "currency": settings.default_currency,
            "status": BookingStatus.PENDING.value,
            "service_category": data.service_category,
            "duration": data.duration,
            "duration_value": data.duration_value,
            "coordinates": data.coordinates.model_dump(),
            "skill_tags": data.skill_tags,
            "insurance_required": data.insurance_required,
            "background_check_required": data.background_check_required,
            "base_price": _minor_units(data.base_price),
            "surge_multiplier": data.surge_multiplier,
            "insurance_cost": _minor_units(data.insurance_cost),
        })
        booking = Booking(**row)
        logger.info(f"Booking {booking.booking_id} created by {actor.user_id} for provider {booking.provider_id}")

        await self._dispatch(
            booking, "new_booking",
            lambda: self.notifier.notify_new_booking(provider["user_id"], _new_booking_summary(booking))
        )
        return booking

    async def create_direct(self, actor: AuthContext, data: DirectBookingCreate) -> Booking:
        provider = await self._bookable_provider(data.provider_id, "Provider")

        row = await self.bookings.insert({
            "user_id": actor.user_id,
            "provider_id": provider["provider_id"],
            "service_type": data.service_type,
            "description": data.description,
            "preferred_date": data.preferred_date,
            "preferred_time": data.preferred_time,
            "urgency": data.urgency.value,
            "budget": data.budget,
            "address": data.address,
            "contact_phone": data.contact_phone,
            "amount": data.amount,
            "currency": data.currency,
            "status": BookingStatus.PENDING.value,
        })
        booking = Booking(**row)
        logger.info(f"Booking {booking.booking_id} created by {actor.user_id} for provider {booking.provider_id}")

        await self._dispatch(
            booking, "new_booking",
            lambda: self.notifier.notify_new_booking(provider["user_id"], _new_booking_summary(booking))
        )
        return booking

    # Provider transitions

    async def accept(self, actor: AuthContext, booking_id: str, data: BookingAccept) -> Booking:
        provider, row = await self._provider_booking(actor, booking_id)
        booking = await self._transition(
            row,
            {"provider_id": provider["provider_id"]},
            BookingStatus.ACCEPTED,
            {
                "accepted_at": utcnow(),
                "provider_notes": data.provider_notes,
                "estimated_duration": data.estimated_duration,
                "final_amount": data.final_amount,
            },
            "Booking cannot be accepted in current status"
        )
        await self._status_changed(booking, provider, BookingEvent.ACCEPTED, {
            "provider_notes": data.provider_notes,
            "estimated_duration": data.estimated_duration,
            "final_amount": data.final_amount,
        })
        return booking

    async def reject(self, actor: AuthContext, booking_id: str, data: BookingReject) -> Booking:
        if not data.rejection_reason or not data.rejection_reason.strip():
            raise ValidationError(
                "Rejection reason is required",
                details={"rejection_reason": "required"}
            )

        provider, row = await self._provider_booking(actor, booking_id)
        booking = await self._transition(
            row,
            {"provider_id": provider["provider_id"]},
            BookingStatus.REJECTED,
            {"rejected_at": utcnow(), "rejection_reason": data.rejection_reason},
            "Booking cannot be rejected in current status"
        )
        await self._status_changed(booking, provider, BookingEvent.REJECTED, {
            "rejection_reason": data.rejection_reason,
        })
        return booking

    async def start(self, actor: AuthContext, booking_id: str) -> Booking:
        provider, row = await self._provider_booking(actor, booking_id)
        booking = await self._transition(
            row,
            {"provider_id": provider["provider_id"]},
            BookingStatus.IN_PROGRESS,
            {"started_at": utcnow()},
            "Booking must be accepted before starting work"
        )
        await self._status_changed(booking, provider, BookingEvent.STARTED, {
            "started_at": booking.started_at,
        })
        return booking

    async def complete(self, actor: AuthContext, booking_id: str, data: BookingComplete) -> Booking:
        provider, row = await self._provider_booking(actor, booking_id)
        final_amount = data.final_amount if data.final_amount is not None else row["amount"]
        booking = await self._transition(
            row,
            {"provider_id": provider["provider_id"]},
            BookingStatus.COMPLETED,
            {"completed_at": utcnow(), "final_amount": final_amount},
            "Booking must be in progress to complete"
        )
        await self._status_changed(booking, provider, BookingEvent.COMPLETED, {
            "completed_at": booking.completed_at,
            "final_amount": booking.final_amount,
        })
        return booking

    # Customer actions

    async def cancel(self, actor: AuthContext, booking_id: str) -> Booking:
        row = await self._customer_booking(actor, booking_id)
        booking = await self._transition(
            row,
            {"user_id": actor.user_id},
            BookingStatus.CANCELLED,
            {},
            "Can only cancel pending bookings"
        )
        return booking

    async def review(self, actor: AuthContext, booking_id: str, data: ReviewCreate) -> Booking:
        row = await self._customer_booking(actor, booking_id)
        if row["status"] != BookingStatus.COMPLETED.value:
            raise InvalidTransition("Can only review completed bookings", current_status=row["status"])
        if row.get("rating") is not None:
            raise InvalidTransition("Booking has already been reviewed", current_status=row["status"])

        # The review is only kept if the provider rating is recomputed with it
        async with self.bookings.transaction():
            updated = await self.bookings.update_where(
                booking_id,
                {
                    "user_id": actor.user_id,
                    "status": BookingStatus.COMPLETED.value,
                    "rating": None,
                    "version": row["version"],
                },
                {"rating": data.rating, "review": data.review, "reviewed_at": utcnow()}
            )
            if updated is None:
                raise InvalidTransition("Booking has already been reviewed", current_status=row["status"])

            booking = Booking(**updated)
            await recompute_provider_rating(self.bookings, self.providers, booking.provider_id)

        logger.info(f"Booking {booking_id} reviewed with rating {data.rating}")
        return booking

    # Reads

    async def get(self, actor: AuthContext, booking_id: str) -> Booking:
        filters: Dict[str, Any] = {"booking_id": booking_id}
        if actor.role == UserRole.USER:
            filters["user_id"] = actor.user_id
        elif actor.role == UserRole.PROVIDER:
            provider = await self._provider_profile(actor)
            filters["provider_id"] = provider["provider_id"]

        row = await self.bookings.find_one(**filters)
        if row is None:
            raise NotFoundOrForbidden()
        return Booking(**row)

    async def list_for_user(
        self,
        actor: AuthContext,
        status: Optional[BookingStatus] = None,
        limit: int = 100
    ) -> List[Booking]:
        filters: Dict[str, Any] = {"user_id": actor.user_id}
        if status:
            filters["status"] = BookingStatus(status).value
        rows = await self.bookings.find(filters, limit=limit)
        return [Booking(**row) for row in rows]

    async def list_for_provider(
        self,
        actor: AuthContext,
        status: Optional[BookingStatus] = None,
        limit: int = 100
    ) -> List[Booking]:
        provider = await self.providers.find_by_user(actor.user_id)
        if provider is None:
            return []
        filters: Dict[str, Any] = {"provider_id": provider["provider_id"]}
        if status:
            filters["status"] = BookingStatus(status).value
        rows = await self.bookings.find(filters, limit=limit)
        return [Booking(**row) for row in rows]

    # Helpers

    async def _bookable_provider(self, provider_id: str, label: str) -> Dict[str, Any]:
        provider = await self.providers.get(provider_id)
        if provider is None:
            raise NotFoundOrForbidden(f"{label} not found")
        if not provider.get("verified"):
            raise DependencyUnavailable(f"{label} is not verified yet")
        if not provider.get("available"):
            raise DependencyUnavailable(f"{label} is currently unavailable")
        return provider

    async def _provider_profile(self, actor: AuthContext) -> Dict[str, Any]:
        provider = await self.providers.find_by_user(actor.user_id)
        if provider is None:
            raise NotFoundOrForbidden("Provider profile not found")
        return provider

    async def _provider_booking(self, actor: AuthContext, booking_id: str):
        provider = await self._provider_profile(actor)
        row = await self.bookings.find_one(booking_id=booking_id, provider_id=provider["provider_id"])
        if row is None:
            raise NotFoundOrForbidden()
        return provider, row

    async def _customer_booking(self, actor: AuthContext, booking_id: str) -> Dict[str, Any]:
        row = await self.bookings.find_one(booking_id=booking_id, user_id=actor.user_id)
        if row is None:
            raise NotFoundOrForbidden()
        return row

    async def _transition(
        self,
        row: Dict[str, Any],
        owner: Dict[str, Any],
        target: BookingStatus,
        changes: Dict[str, Any],
        message: str
    ) -> Booking:
        current = BookingStatus(row["status"])
        if not can_transition(current, target):
            raise InvalidTransition(message, current_status=current.value)

        updated = await self.bookings.update_where(
            row["booking_id"],
            {**owner, "status": current.value, "version": row["version"]},
            {"status": target.value, **changes}
        )
        if updated is None:
            # Lost a race with another transition on the same booking
            latest = await self.bookings.find_one(booking_id=row["booking_id"], **owner)
            raise InvalidTransition(
                message,
                current_status=latest["status"] if latest else None
            )

        logger.info(f"Booking {row['booking_id']} moved {current.value} -> {target.value}")
        return Booking(**updated)

    async def _status_changed(
        self,
        booking: Booking,
        provider: Dict[str, Any],
        event: BookingEvent,
        extra: Dict[str, Any]
    ) -> None:
        summary = {"id": booking.booking_id, "service_type": booking.service_type, **extra}
        await self._dispatch(
            booking, event.value,
            lambda: self.notifier.notify_booking_status_change(
                booking.user_id, provider["user_id"], summary, event
            )
        )

    async def _dispatch(self, booking: Booking, event: str, send: Callable[[], Awaitable[None]]) -> None:
        # The transition is already stored; delivery problems must not undo it
        try:
            await send()
        except Exception:
            logger.exception(f"Notification '{event}' for booking {booking.booking_id} failed")


def _minor_units(amount: float) -> int:
    return int(round(amount * 100))


def _new_booking_summary(booking: Booking) -> Dict[str, Any]:
    return {
        "id": booking.booking_id,
        "service_type": booking.service_type,
        "description": booking.description,
        "preferred_date": booking.preferred_date.isoformat(),
        "preferred_time": booking.preferred_time,
        "urgency": booking.urgency.value,
        "address": booking.address,
    }
