from sqlalchemy.pool import StaticPool

from community_moderation.db.session import build_engine, get_session


def test_session_dependency():
    gen = get_session()
    session = next(gen)
    assert session is not None
    session.close()


def test_in_memory_sqlite_shares_one_connection():
    engine = build_engine("sqlite://")
    assert isinstance(engine.pool, StaticPool)
    assert not isinstance(build_engine("sqlite:///./local.db").pool, StaticPool)
