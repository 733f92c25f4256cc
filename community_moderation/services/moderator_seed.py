from __future__ import annotations

import json
import secrets
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from loguru import logger
from pydantic import ValidationError
from sqlmodel import Session, select

from community_moderation.models.enums import AgeGroup
from community_moderation.models.moderator import ModeratorProfile
from community_moderation.models.user import User
from community_moderation.schemas.moderation import ModeratorCreate
from community_moderation.services.auth_service import create_user
from community_moderation.services.moderator_service import upsert_moderator


@dataclass(frozen=True)
class ModeratorSeed:
    email: str
    profile: ModeratorCreate
    age_group: AgeGroup = AgeGroup.ADULT


@dataclass
class SeedSummary:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    emails: list[str] = field(default_factory=list)


def _parse_payload(raw: Any) -> list[ModeratorSeed]:
    if isinstance(raw, dict):
        items = raw.get('moderators', [])
    else:
        items = raw
    if not isinstance(items, list):
        raise ValueError('moderator seeds must be a list or {moderators: []}')
    seeds: list[ModeratorSeed] = []
    for item in items:
        if not isinstance(item, dict):
            raise ValueError('each moderator seed must be an object')
        email = str(item.get('email', '')).strip().lower()
        if not email:
            raise ValueError('moderator seed requires an email')
        try:
            profile = ModeratorCreate.model_validate({key: value for key, value in item.items() if key != 'email'})
            age_group = AgeGroup(item.get('age_group') or AgeGroup.ADULT)
        except (ValidationError, ValueError) as exc:
            raise ValueError(f'invalid moderator seed for {email}: {exc}') from exc
        seeds.append(ModeratorSeed(email=email, profile=profile, age_group=age_group))
    return seeds


def load_moderator_seeds(path: Path) -> list[ModeratorSeed]:
    raw = path.read_text(encoding='utf-8')
    return _parse_payload(json.loads(raw))


def _unchanged(record: ModeratorProfile, profile: ModeratorCreate) -> bool:
    return (
        record.name == profile.name
        and record.moderator_level == profile.moderator_level
        and list(record.specializations or []) == profile.specializations
        and list(record.permissions or []) == profile.permissions
        and record.reputation == profile.reputation
        and record.status == profile.status
    )


def seed_moderators(session: Session, seeds: Iterable[ModeratorSeed]) -> SeedSummary:
    summary = SeedSummary()
    for seed in seeds:
        user = session.exec(select(User).where(User.email == seed.email)).first()
        if user is None:
            # seeded accounts sign in through a password reset
            user = create_user(
                session,
                seed.email,
                secrets.token_urlsafe(24),
                name=seed.profile.name,
                age_group=seed.age_group,
            )
        existing = session.get(ModeratorProfile, user.id)
        if existing is not None and _unchanged(existing, seed.profile):
            summary.skipped += 1
            continue
        upsert_moderator(session, user.id, seed.profile)
        if existing is None:
            summary.created += 1
        else:
            summary.updated += 1
        summary.emails.append(seed.email)
    logger.info(
        'moderation.moderators.seeded',
        created=summary.created,
        updated=summary.updated,
        skipped=summary.skipped,
    )
    return summary
