from sqlmodel import SQLModel
from community_moderation.db.session import engine
from community_moderation.core.config import settings
from community_moderation.models import (  # noqa: F401
    user,
    refresh_token,
    notification,
    report,
    evidence,
    vote,
    moderator_action,
    resolution,
    queue_entry,
    moderator,
)


def init_db(drop_all: bool = False) -> None:
    if drop_all:
        SQLModel.metadata.drop_all(engine)
    if (
        settings.DATABASE_URL.startswith('sqlite')
        or settings.ENV != 'production'
        or settings.AUTO_CREATE_TABLES
    ):
        SQLModel.metadata.create_all(engine)
