from datetime import datetime
from sqlmodel import Field, SQLModel
from community_moderation.models.base import IDModel, TimestampModel, datetime_type


class RefreshToken(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'refresh_tokens'

    token: str = Field(index=True, unique=True)
    user_id: str = Field(index=True)
    expires_at: datetime = Field(sa_type=datetime_type(), sa_column_kwargs={"nullable": False})
