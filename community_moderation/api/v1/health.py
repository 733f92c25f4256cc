from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlmodel import Session
from community_moderation.core.config import settings
from community_moderation.db.session import get_session

router = APIRouter()


@router.get('/health')
def health(session: Session = Depends(get_session)) -> dict:
    session.connection().execute(text('SELECT 1'))
    return {'status': 'ok', 'env': settings.ENV}
