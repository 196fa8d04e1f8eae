import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")

import copy
import uuid
from contextlib import asynccontextmanager
from datetime import date, datetime, timedelta, timezone
from itertools import count

import pytest

from homeserve.models.auth import AuthContext, UserRole
from homeserve.models.booking import BookingCreate, Coordinates
from homeserve.services.booking_workflow import BookingWorkflow
from homeserve.services.earnings import EarningsService


class FakeDatabase:
    """Shared by the fake stores the way the real ones share a connection"""

    def __init__(self):
        self.stores = []

    @asynccontextmanager
    async def transaction(self):
        saved = [(state, copy.deepcopy(state)) for store in self.stores for state in store.state()]
        try:
            yield
        except BaseException:
            for state, snapshot in saved:
                state.clear()
                state.update(snapshot)
            raise


def _matches(row, filters):
    return all(row.get(column) == value for column, value in filters.items())


class FakeBookingStore:
    """In-memory stand-in for BookingStore with the same conditional-update semantics"""

    def __init__(self, db=None):
        self.rows = {}
        self._clock = count()
        self.db = db or FakeDatabase()
        self.db.stores.append(self)

    def state(self):
        return [self.rows]

    def transaction(self):
        return self.db.transaction()

    async def insert(self, values):
        created = datetime(2026, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=next(self._clock))
        row = {
            "booking_id": str(uuid.uuid4()),
            "version": 1,
            "created_at": created,
            "updated_at": created,
            **values,
        }
        self.rows[row["booking_id"]] = row
        return copy.deepcopy(row)

    async def find_one(self, **filters):
        for row in self.rows.values():
            if _matches(row, filters):
                return copy.deepcopy(row)
        return None

    async def find(self, filters, limit=100):
        rows = [row for row in self.rows.values() if _matches(row, filters)]
        rows.sort(key=lambda row: row["created_at"], reverse=True)
        return [copy.deepcopy(row) for row in rows[:limit]]

    async def update_where(self, booking_id, expected, changes):
        row = self.rows.get(booking_id)
        if row is None or not _matches(row, expected):
            return None
        row.update(changes)
        row["version"] += 1
        row["updated_at"] = datetime.now(timezone.utc)
        return copy.deepcopy(row)

    async def ratings_for_provider(self, provider_id):
        return [
            row["rating"] for row in self.rows.values()
            if row["provider_id"] == provider_id and row.get("rating") is not None
        ]


class FakeProviderStore:
    def __init__(self, db=None):
        self.rows = {}
        self.withdrawals = {}
        self.db = db or FakeDatabase()
        self.db.stores.append(self)

    def state(self):
        return [self.rows, self.withdrawals]

    def transaction(self):
        return self.db.transaction()

    def add(self, provider_id, user_id, **fields):
        self.rows[provider_id] = {
            "provider_id": provider_id,
            "user_id": user_id,
            "category": "plumbing",
            "description": None,
            "verified": True,
            "available": True,
            "rating": None,
            "total_earnings": 0,
            "platform_fees": 0,
            "completed_bookings": 0,
            "bank_details": None,
            "upi_id": None,
            **fields,
        }
        self.withdrawals.setdefault(provider_id, [])
        return self.rows[provider_id]

    async def get(self, provider_id):
        row = self.rows.get(provider_id)
        return copy.deepcopy(row) if row else None

    async def find_by_user(self, user_id):
        for row in self.rows.values():
            if row["user_id"] == user_id:
                return copy.deepcopy(row)
        return None

    async def update(self, provider_id, changes):
        row = self.rows.get(provider_id)
        if row is None:
            return None
        row.update(changes)
        return copy.deepcopy(row)

    async def credit_earnings(self, provider_id, earnings, commission):
        row = self.rows[provider_id]
        row["total_earnings"] += earnings
        row["platform_fees"] += commission
        row["completed_bookings"] += 1
        return copy.deepcopy(row)

    async def append_withdrawal(self, provider_id, entry):
        stored = {"payment_method": None, **entry}
        self.withdrawals.setdefault(provider_id, []).append(stored)
        return dict(stored)

    async def withdrawal_history(self, provider_id):
        return [dict(entry) for entry in self.withdrawals.get(provider_id, [])]


class RecordingNotifier:
    def __init__(self):
        self.new_bookings = []
        self.status_changes = []

    async def notify_new_booking(self, recipient_user_id, booking):
        self.new_bookings.append((recipient_user_id, booking))

    async def notify_booking_status_change(self, customer_user_id, provider_user_id, booking, event):
        self.status_changes.append((customer_user_id, provider_user_id, booking, event))


class FailingNotifier:
    async def notify_new_booking(self, recipient_user_id, booking):
        raise RuntimeError("push service down")

    async def notify_booking_status_change(self, customer_user_id, provider_user_id, booking, event):
        raise RuntimeError("push service down")


@pytest.fixture
def db():
    return FakeDatabase()


@pytest.fixture
def bookings(db):
    return FakeBookingStore(db)


@pytest.fixture
def providers(db):
    store = FakeProviderStore(db)
    store.add("prov-1", "provider-user-1")
    return store


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def workflow(bookings, providers, notifier):
    return BookingWorkflow(bookings, providers, notifier)


@pytest.fixture
def earnings(providers, bookings):
    return EarningsService(providers, bookings)


@pytest.fixture
def customer():
    return AuthContext(user_id="customer-1", role=UserRole.USER)


@pytest.fixture
def other_customer():
    return AuthContext(user_id="customer-2", role=UserRole.USER)


@pytest.fixture
def provider_user():
    return AuthContext(user_id="provider-user-1", role=UserRole.PROVIDER)


@pytest.fixture
def admin():
    return AuthContext(user_id="admin-1", role=UserRole.ADMIN)


@pytest.fixture
def make_request():
    def factory(**overrides):
        fields = {
            "worker_id": "prov-1",
            "service_type": "plumbing",
            "service_category": "Leak repair",
            "duration": "hours",
            "duration_value": 2,
            "location": "12 Lake Road",
            "coordinates": Coordinates(lat=12.97, lng=77.59),
            "time_slot": "10:00-12:00",
            "date": date(2026, 11, 2),
            "urgency": "normal",
            "total_price": 100,
            "base_price": 90,
            "surge_multiplier": 1,
            "insurance_cost": 10,
        }
        fields.update(overrides)
        return BookingCreate(**fields)
    return factory
