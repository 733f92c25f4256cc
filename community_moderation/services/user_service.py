from sqlmodel import Session, select

from community_moderation.models.user import User
from community_moderation.schemas.user import UserOut, UserUpdate


def to_user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        email=user.email,
        name=user.name,
        age_group=user.age_group,
        is_active=user.is_active,
        role=user.role,
    )


def update_user(session: Session, user: User, payload: UserUpdate) -> User:
    data = payload.model_dump(exclude_unset=True)
    email = data.get('email')
    if email is not None and email != user.email:
        existing = session.exec(select(User).where(User.email == email)).first()
        if existing and existing.id != user.id:
            raise ValueError('Email already registered')
        user.email = email
    if data.get('name') is not None:
        user.name = data['name']
    if data.get('age_group') is not None:
        user.age_group = data['age_group']

    session.add(user)
    session.commit()
    session.refresh(user)
    return user
