"""LLM providers available to the severity classifier.

``PROVIDERS`` is a JSON array of OpenAI-compatible hosts, each listing the
model ids it serves. A model id may appear under one host only.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Iterator

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from community_moderation.core.config import settings


class _Stripped(BaseModel):
    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True)


class ProviderModelConfig(_Stripped):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class ProviderConfig(_Stripped):
    host: str = Field(..., min_length=1)
    base_url: str = Field(..., min_length=1)
    api_key_env: str = Field(..., min_length=1)
    models: list[ProviderModelConfig] = Field(..., min_length=1)

    @field_validator('base_url')
    @classmethod
    def drop_trailing_slash(cls, value: str) -> str:
        return value.rstrip('/')


class ProviderRegistry:
    def __init__(self, providers: list[ProviderConfig]) -> None:
        if not providers:
            raise RuntimeError('PROVIDERS must include at least one provider')
        hosts = [provider.host for provider in providers]
        duplicated_hosts = sorted({host for host in hosts if hosts.count(host) > 1})
        if duplicated_hosts:
            raise RuntimeError(f"Duplicate provider host: {', '.join(duplicated_hosts)}")
        self._providers = list(providers)
        self._by_model: dict[str, ProviderConfig] = {}
        for provider, model in self._entries():
            if model.id in self._by_model:
                raise RuntimeError(f'Duplicate model id: {model.id}')
            self._by_model[model.id] = provider

    def _entries(self) -> Iterator[tuple[ProviderConfig, ProviderModelConfig]]:
        for provider in self._providers:
            for model in provider.models:
                yield provider, model

    def list_models(self) -> list[dict[str, str]]:
        return [{'id': model.id, 'name': model.name, 'host': provider.host} for provider, model in self._entries()]

    def has_model(self, model_id: str) -> bool:
        return model_id in self._by_model

    def provider_for_model(self, model_id: str) -> ProviderConfig:
        try:
            return self._by_model[model_id]
        except KeyError:
            raise RuntimeError(f'Model not available: {model_id}') from None

    def default_model_id(self) -> str:
        return self._providers[0].models[0].id


def parse_providers(raw: str) -> list[ProviderConfig]:
    if not raw or not raw.strip():
        raise RuntimeError('PROVIDERS is missing in environment or .env')
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RuntimeError('PROVIDERS must be valid JSON') from exc
    if not isinstance(payload, list) or not payload:
        raise RuntimeError('PROVIDERS must be a non-empty JSON array')
    try:
        return [ProviderConfig.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise RuntimeError(f'PROVIDERS validation error: {exc}') from exc


@lru_cache
def get_provider_registry() -> ProviderRegistry:
    return ProviderRegistry(parse_providers(settings.PROVIDERS))


def reset_provider_registry() -> None:
    get_provider_registry.cache_clear()


def resolve_severity_model_id() -> str:
    registry = get_provider_registry()
    if registry.has_model(settings.SEVERITY_MODEL_ID):
        return settings.SEVERITY_MODEL_ID
    fallback = registry.default_model_id()
    logger.warning('moderation.severity.model_unavailable', requested=settings.SEVERITY_MODEL_ID, using=fallback)
    return fallback
