import pytest
from pydantic import ValidationError

from homeserve.models.booking import (
    BookingAccept,
    DirectBookingCreate,
    RequestedUrgency,
    Urgency,
    stored_urgency,
)


@pytest.mark.parametrize("requested, stored", [
    ("emergency", Urgency.HIGH),
    ("urgent", Urgency.NORMAL),
    ("normal", Urgency.LOW),
])
def test_requested_urgency_maps_one_level_down(requested, stored):
    assert stored_urgency(RequestedUrgency(requested)) is stored


def test_every_requested_urgency_has_a_stored_level():
    assert {stored_urgency(level) for level in RequestedUrgency} == set(Urgency)


@pytest.mark.parametrize("overrides", [
    {"duration_value": 0},
    {"surge_multiplier": 0.5},
    {"total_price": -1},
    {"base_price": -10},
    {"insurance_cost": -0.01},
    {"urgency": "high"},
    {"service_type": ""},
    {"worker_id": ""},
])
def test_booking_request_rejects_invalid_fields(make_request, overrides):
    with pytest.raises(ValidationError):
        make_request(**overrides)


def test_booking_request_defaults(make_request):
    request = make_request()
    assert request.urgency is RequestedUrgency.NORMAL
    assert request.insurance_required is False
    assert request.skill_tags is None


def test_direct_booking_requires_a_real_description():
    with pytest.raises(ValidationError):
        DirectBookingCreate(
            provider_id="prov-1",
            service_type="cleaning",
            description="short",
            preferred_date="2026-11-02",
            preferred_time="09:00",
            address="1 Main Street",
            contact_phone="555-0100",
        )


def test_direct_booking_defaults():
    request = DirectBookingCreate(
        provider_id="prov-1",
        service_type="cleaning",
        description="Deep clean of a two bedroom flat",
        preferred_date="2026-11-02",
        preferred_time="09:00",
        address="1 Main Street",
        contact_phone="555-0100",
    )
    assert request.amount == 5000
    assert request.currency == "usd"
    assert request.urgency is Urgency.NORMAL


def test_final_amount_cannot_be_negative():
    with pytest.raises(ValidationError):
        BookingAccept(final_amount=-1)
