from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class NotificationUpdate(BaseModel):
    read: bool


class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: str
    content: str
    report_id: Optional[str] = None
    read: bool
    created_at: datetime


class UnreadCount(BaseModel):
    unread: int
