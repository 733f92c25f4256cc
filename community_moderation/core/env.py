from __future__ import annotations

import os
from pathlib import Path

from community_moderation.core.config import settings


def _iter_env_files() -> list[Path]:
    env_file = settings.model_config.get('env_file')
    if not env_file:
        return []
    if isinstance(env_file, (list, tuple)):
        return [Path(item) for item in env_file]
    return [Path(env_file)]


def _parse_env_line(line: str) -> tuple[str, str] | None:
    raw = line.strip()
    if not raw or raw.startswith('#'):
        return None
    if raw.startswith('export '):
        raw = raw[len('export ') :].lstrip()
    if '=' not in raw:
        return None
    key, value = raw.split('=', 1)
    key = key.strip()
    value = value.strip()
    if not key:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        value = value[1:-1]
    return key, value


def read_env_file(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    try:
        content = path.read_text(encoding='utf-8')
    except OSError:
        return {}
    values: dict[str, str] = {}
    for line in content.splitlines():
        parsed = _parse_env_line(line)
        if parsed and parsed[1]:
            values[parsed[0]] = parsed[1]
    return values


def get_env_value(key: str) -> str | None:
    """Look up a provider secret, process environment first, then ``.env`` files.

    An empty environment variable counts as unset.
    """
    if key in os.environ:
        value = os.getenv(key)
        return value if value else None
    for path in _iter_env_files():
        value = read_env_file(path).get(key)
        if value:
            return value
    return None
