from typing import Optional
from pydantic import BaseModel, EmailStr
from community_moderation.models.enums import AgeGroup, UserRole


class UserOut(BaseModel):
    id: str
    email: EmailStr
    name: Optional[str] = None
    age_group: AgeGroup
    is_active: bool
    role: UserRole


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    name: Optional[str] = None
    age_group: Optional[AgeGroup] = None
