# homeserve/queries/provider_queries.py
from typing import Optional, Dict, Any, List
import asyncpg

from .sql import check_columns, set_clause

PROVIDER_UPDATABLE = frozenset({
    "category", "description", "verified", "available", "rating",
    "bank_details", "upi_id",
})


class ProviderStore:
    """Provider profiles and their withdrawal ledger"""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    def transaction(self):
        return self.conn.transaction()

    async def get(self, provider_id: str) -> Optional[Dict[str, Any]]:
        row = await self.conn.fetchrow(
            "SELECT * FROM provider WHERE provider_id = $1",
            provider_id
        )
        return dict(row) if row else None

    async def find_by_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        row = await self.conn.fetchrow(
            "SELECT * FROM provider WHERE user_id = $1",
            user_id
        )
        return dict(row) if row else None

    async def update(self, provider_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        check_columns(changes, PROVIDER_UPDATABLE, "provider")
        assignments, params = set_clause(changes)
        row = await self.conn.fetchrow(
            f"""
            UPDATE provider
            SET {assignments}
            WHERE provider_id = ${len(params) + 1}
            RETURNING *
            """,
            *params, provider_id
        )
        return dict(row) if row else None

    async def credit_earnings(
        self,
        provider_id: str,
        earnings: float,
        commission: float
    ) -> Optional[Dict[str, Any]]:
        """Add one paid booking to the running totals"""
        row = await self.conn.fetchrow(
            """
            UPDATE provider
            SET total_earnings = total_earnings + $1,
                platform_fees = platform_fees + $2,
                completed_bookings = completed_bookings + 1
            WHERE provider_id = $3
            RETURNING *
            """,
            earnings, commission, provider_id
        )
        return dict(row) if row else None

    async def append_withdrawal(self, provider_id: str, entry: Dict[str, Any]) -> Dict[str, Any]:
        row = await self.conn.fetchrow(
            """
            INSERT INTO provider_withdrawal (
                provider_id, amount, date, status, transaction_id, payment_method
            )
            VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING amount, date, status, transaction_id, payment_method
            """,
            provider_id,
            entry["amount"],
            entry["date"],
            entry["status"],
            entry["transaction_id"],
            entry.get("payment_method")
        )
        return dict(row)

    async def withdrawal_history(self, provider_id: str) -> List[Dict[str, Any]]:
        """Oldest entry first"""
        rows = await self.conn.fetch(
            """
            SELECT amount, date, status, transaction_id, payment_method
            FROM provider_withdrawal
            WHERE provider_id = $1
            ORDER BY date, withdrawal_id
            """,
            provider_id
        )
        return [dict(row) for row in rows]
