from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from community_moderation.api.v1.router import api_router
from community_moderation.core.config import settings
from community_moderation.core.logging import configure_logging
from community_moderation.core.providers import get_provider_registry
from community_moderation.db.init_db import init_db

configure_logging(settings.LOG_LEVEL, serialize=settings.LOG_JSON)


@asynccontextmanager
async def lifespan(_: FastAPI):
    registry = get_provider_registry()
    init_db()
    logger.info('app.started', env=settings.ENV, models=len(registry.list_models()))
    yield
    logger.info('app.stopped')

app = FastAPI(title=settings.PROJECT_NAME, debug=settings.DEBUG, lifespan=lifespan)

allow_origins = settings.CORS_ORIGINS
allow_credentials = '*' not in allow_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=allow_credentials,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.include_router(api_router)
