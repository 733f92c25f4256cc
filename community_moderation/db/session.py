from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine
from community_moderation.core.config import settings


def build_engine(url: str):
    if url.startswith('sqlite'):
        kwargs = {'connect_args': {'check_same_thread': False}}
        if url in ('sqlite://', 'sqlite:///:memory:'):
            kwargs['poolclass'] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)


def get_session():
    with Session(engine) as session:
        yield session
