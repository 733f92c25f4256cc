from __future__ import annotations

from pathlib import Path
from typing import Optional

SEVERITY_SYSTEM_PROMPT = """
You assess community reports filed against learning content on an education platform.
Determine the severity level based on:
1) Potential harm to users, especially children
2) Policy violation severity
3) Community impact
4) Legal implications
5) Urgency of response needed
Return severity as one of "low", "medium", "high", "urgent", a short reasoning string,
and a suggested immediate action as recommended_action.
""".strip()


def strip_frontmatter(raw: str) -> str:
    if not raw.lstrip().startswith('---'):
        return raw.strip()
    lines = raw.splitlines()
    end_index = None
    for idx in range(1, len(lines)):
        if lines[idx].strip() == '---':
            end_index = idx
            break
    if end_index is None:
        return raw.strip()
    return '\n'.join(lines[end_index + 1 :]).strip()


def read_prompt_file(path: Path) -> str:
    try:
        content = path.read_text(encoding='utf-8', errors='replace').strip()
    except OSError:
        return ''
    if not content:
        return ''
    return strip_frontmatter(content)


def load_severity_system_prompt(path: Optional[str]) -> str:
    """Prompt override from a markdown file, or the built-in prompt when unset or empty."""
    if not path:
        return SEVERITY_SYSTEM_PROMPT
    return read_prompt_file(Path(path).expanduser()) or SEVERITY_SYSTEM_PROMPT


def build_severity_prompt(report_type: str, description: str, content_id: str) -> str:
    return '\n'.join(
        [
            'Analyze this community report for severity assessment:',
            f'Report Type: {report_type}',
            f'Description: {description.strip()}',
            f'Content ID: {content_id}',
        ]
    )
