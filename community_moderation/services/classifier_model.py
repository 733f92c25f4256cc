from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from openai import AsyncOpenAI
from pydantic_ai.models import cached_async_http_client
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers import Provider

from community_moderation.core.env import get_env_value
from community_moderation.core.providers import get_provider_registry


@dataclass(frozen=True)
class ClassifierEndpoint:
    """Where a classifier model is served and the key used to reach it."""

    model_id: str
    host: str
    base_url: str
    api_key: str


class ModerationProvider(Provider[AsyncOpenAI]):
    """pydantic-ai provider over any OpenAI-compatible endpoint."""

    def __init__(self, endpoint: ClassifierEndpoint) -> None:
        self._endpoint = endpoint
        self._client = AsyncOpenAI(
            base_url=endpoint.base_url,
            api_key=endpoint.api_key,
            http_client=cached_async_http_client(provider=endpoint.host),
        )

    @property
    def name(self) -> str:
        return self._endpoint.host

    @property
    def base_url(self) -> str:
        return self._endpoint.base_url

    @property
    def client(self) -> AsyncOpenAI:
        return self._client


def resolve_classifier_endpoint(model_id: str) -> ClassifierEndpoint:
    provider = get_provider_registry().provider_for_model(model_id)
    api_key = get_env_value(provider.api_key_env)
    if not api_key:
        raise RuntimeError(f'{provider.api_key_env} is missing in environment or .env')
    return ClassifierEndpoint(model_id=model_id, host=provider.host, base_url=provider.base_url, api_key=api_key)


def build_openai_chat_model(model_id: str) -> OpenAIChatModel:
    endpoint = resolve_classifier_endpoint(model_id)
    logger.debug('moderation.severity.provider', host=endpoint.host, model=model_id)
    return OpenAIChatModel(model_id, provider=ModerationProvider(endpoint))
