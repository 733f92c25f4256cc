from typing import Optional
from sqlmodel import Field, SQLModel
from community_moderation.models.base import IDModel, TimestampModel


class Notification(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'notifications'

    user_id: str = Field(index=True)
    type: str
    content: str
    report_id: Optional[str] = Field(default=None, index=True)
    read: bool = False
