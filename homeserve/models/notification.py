from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Dict, Optional
from enum import Enum

class BookingEvent(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    STARTED = "started"
    COMPLETED = "completed"

class NotificationBase(BaseModel):
    message: str = Field(..., max_length=500)
    is_read: bool = False

class NotificationOut(NotificationBase):
    notification_id: int
    recipient_id: str
    payload: Optional[Dict[str, Any]] = None
    created_at: datetime
