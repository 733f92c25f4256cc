from typing import Optional
from sqlmodel import Field, SQLModel
from community_moderation.models.base import IDModel, TimestampModel
from community_moderation.models.enums import AgeGroup, UserRole, enum_column


class User(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'users'

    email: str = Field(index=True, unique=True)
    hashed_password: str
    name: Optional[str] = None
    age_group: AgeGroup = Field(default=AgeGroup.ADULT, sa_column=enum_column(AgeGroup, 'user_age_group'))
    is_active: bool = True
    role: UserRole = Field(default=UserRole.USER, sa_column=enum_column(UserRole, 'user_role'))
