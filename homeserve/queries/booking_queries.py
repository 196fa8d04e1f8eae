# homeserve/queries/booking_queries.py
from typing import Optional, Dict, Any, List
import uuid
import asyncpg

from .sql import check_columns, set_clause, where_clause

BOOKING_COLUMNS = frozenset({
    "booking_id", "user_id", "provider_id",
    "service_type", "description", "preferred_date", "preferred_time",
    "urgency", "budget", "address", "contact_phone",
    "service_category", "duration", "duration_value", "coordinates",
    "skill_tags", "insurance_required", "background_check_required",
    "base_price", "surge_multiplier", "insurance_cost",
    "status", "version", "accepted_at", "rejected_at", "rejection_reason",
    "started_at", "completed_at",
    "provider_notes", "estimated_duration", "final_amount",
    "amount", "currency", "payment_processed_at",
    "rating", "review", "reviewed_at",
    "created_at", "updated_at",
})

# Never written by an update
IMMUTABLE_COLUMNS = frozenset({"booking_id", "user_id", "provider_id", "version", "created_at"})


class BookingStore:
    """Booking persistence on top of a single asyncpg connection"""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    def transaction(self):
        """Transaction on the shared connection; use with ``async with``"""
        return self.conn.transaction()

    async def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        values = {"booking_id": str(uuid.uuid4()), **values}
        check_columns(values, BOOKING_COLUMNS, "booking")
        columns = ", ".join(values)
        placeholders = ", ".join(f"${i}" for i in range(1, len(values) + 1))
        row = await self.conn.fetchrow(
            f"INSERT INTO booking ({columns}) VALUES ({placeholders}) RETURNING *",
            *values.values()
        )
        return dict(row)

    async def find_one(self, **filters) -> Optional[Dict[str, Any]]:
        check_columns(filters, BOOKING_COLUMNS, "booking")
        where, params = where_clause(filters)
        row = await self.conn.fetchrow(f"SELECT * FROM booking WHERE {where}", *params)
        return dict(row) if row else None

    async def find(self, filters: Dict[str, Any], limit: int = 100) -> List[Dict[str, Any]]:
        """Bookings matching every filter, newest first"""
        check_columns(filters, BOOKING_COLUMNS, "booking")
        where, params = where_clause(filters)
        rows = await self.conn.fetch(
            f"SELECT * FROM booking WHERE {where} "
            f"ORDER BY created_at DESC LIMIT ${len(params) + 1}",
            *params, limit
        )
        return [dict(row) for row in rows]

    async def update_where(
        self,
        booking_id: str,
        expected: Dict[str, Any],
        changes: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Apply changes only if the booking still matches expected.
        Bumps version and updated_at. Returns the updated row, or None
        when nothing matched.
        """
        check_columns(expected, BOOKING_COLUMNS, "booking")
        check_columns(changes, BOOKING_COLUMNS - IMMUTABLE_COLUMNS, "booking")
        assignments, params = set_clause(changes)
        where, where_params = where_clause(
            {"booking_id": booking_id, **expected}, start=len(params) + 1
        )
        if assignments:
            assignments += ", "
        row = await self.conn.fetchrow(
            f"""
            UPDATE booking
            SET {assignments}version = version + 1, updated_at = NOW()
            WHERE {where}
            RETURNING *
            """,
            *params, *where_params
        )
        return dict(row) if row else None

    async def ratings_for_provider(self, provider_id: str) -> List[int]:
        rows = await self.conn.fetch(
            "SELECT rating FROM booking WHERE provider_id = $1 AND rating IS NOT NULL",
            provider_id
        )
        return [row["rating"] for row in rows]
