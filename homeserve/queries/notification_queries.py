# homeserve/queries/notification_queries.py
from typing import Optional, Dict, Any, List
import asyncpg

async def create_notification(
    conn: asyncpg.Connection,
    recipient_id: str,
    message: str,
    payload: Optional[Dict[str, Any]] = None
) -> int:
    """Store an in-app notification"""
    return await conn.fetchval(
        """
        INSERT INTO notification (recipient_id, message, payload)
        VALUES ($1, $2, $3)
        RETURNING notification_id
        """,
        recipient_id, message[:500], payload
    )

async def get_notifications(
    conn: asyncpg.Connection,
    recipient_id: str,
    is_read: Optional[bool] = None
) -> List[Dict[str, Any]]:
    query = """
        SELECT notification_id, recipient_id, message, payload, is_read, created_at
        FROM notification
        WHERE recipient_id = $1
    """
    params: List[Any] = [recipient_id]

    if is_read is not None:
        query += " AND is_read = $2"
        params.append(is_read)

    query += " ORDER BY created_at DESC"

    rows = await conn.fetch(query, *params)
    return [dict(row) for row in rows]

async def count_unread(conn: asyncpg.Connection, recipient_id: str) -> int:
    return await conn.fetchval(
        """
        SELECT COUNT(*) FROM notification
        WHERE recipient_id = $1 AND is_read = false
        """,
        recipient_id
    )

async def mark_read(
    conn: asyncpg.Connection,
    recipient_id: str,
    notification_id: Optional[int] = None
) -> None:
    """Mark one notification, or all of the recipient's, as read"""
    if notification_id is None:
        await conn.execute(
            """
            UPDATE notification
            SET is_read = true
            WHERE recipient_id = $1 AND is_read = false
            """,
            recipient_id
        )
    else:
        await conn.execute(
            """
            UPDATE notification
            SET is_read = true
            WHERE notification_id = $1 AND recipient_id = $2
            """,
            notification_id, recipient_id
        )
