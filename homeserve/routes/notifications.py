from fastapi import APIRouter, Depends, HTTPException
from typing import List
import asyncpg

from ..utils.auth import get_current_user
from ..database import get_db
from ..models.auth import AuthContext
from ..models.notification import NotificationOut
from ..queries.notification_queries import count_unread, get_notifications, mark_read

notifications_router = APIRouter(prefix="/notifications", tags=["Notifications"])

READ_FILTERS = {"all": None, "read": True, "unread": False}

@notifications_router.get("/", response_model=List[NotificationOut])
async def list_notifications(
    status: str = "all",  # Options: "all", "read", "unread"
    current_user: AuthContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    if status not in READ_FILTERS:
        raise HTTPException(status_code=400, detail="status must be one of: all, read, unread")
    return await get_notifications(conn, current_user.user_id, READ_FILTERS[status])

@notifications_router.get("/unread/count")
async def get_unread_notification_count(
    current_user: AuthContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    return {"count": await count_unread(conn, current_user.user_id)}

@notifications_router.put("/mark-all-read")
async def mark_all_read(
    current_user: AuthContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    await mark_read(conn, current_user.user_id)
    return {"message": "All notifications marked as read"}

@notifications_router.put("/{notification_id}/mark-read")
async def mark_notification_read(
    notification_id: int,
    current_user: AuthContext = Depends(get_current_user),
    conn: asyncpg.Connection = Depends(get_db)
):
    await mark_read(conn, current_user.user_id, notification_id)
    return {"message": "Notification marked as read"}
