from __future__ import annotations

from typing import Optional, Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict
from pydantic_ai import Agent

from community_moderation.core.config import settings
from community_moderation.core.providers import resolve_severity_model_id
from community_moderation.models.enums import ReportType, Severity
from community_moderation.services.ai_prompts import build_severity_prompt, load_severity_system_prompt
from community_moderation.services.classifier_model import build_openai_chat_model


class SeverityAssessment(BaseModel):
    model_config = ConfigDict(extra='ignore')

    severity: Optional[str] = None
    reasoning: Optional[str] = None
    recommended_action: Optional[str] = None


class SeverityClassifier(Protocol):
    async def classify(
        self,
        *,
        report_type: ReportType,
        description: str,
        content_id: str,
    ) -> SeverityAssessment: ...


def parse_severity(value: object) -> Optional[Severity]:
    if isinstance(value, Severity):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Severity(value.strip().lower())
    except ValueError:
        return None


_severity_agent: Agent[None, SeverityAssessment] | None = None


def _get_severity_agent() -> Agent[None, SeverityAssessment]:
    global _severity_agent
    if _severity_agent is not None:
        return _severity_agent
    _severity_agent = Agent(
        model=None,
        output_type=SeverityAssessment,
        system_prompt=load_severity_system_prompt(settings.SEVERITY_PROMPT_PATH),
        defer_model_check=True,
    )
    return _severity_agent


class AgentSeverityClassifier:
    """Asks the configured LLM for a severity label.

    Errors are not handled here; the engine owns the fallback policy.
    """

    def __init__(self, model_id: Optional[str] = None) -> None:
        self.model_id = model_id

    async def classify(
        self,
        *,
        report_type: ReportType,
        description: str,
        content_id: str,
    ) -> SeverityAssessment:
        model_id = self.model_id or resolve_severity_model_id()
        model = build_openai_chat_model(model_id)
        agent = _get_severity_agent()
        prompt = build_severity_prompt(ReportType(report_type).value, description, content_id)
        result = await agent.run(prompt, model=model)
        logger.debug(
            'moderation.severity.assessed',
            model=model_id,
            content_id=content_id,
            severity=result.output.severity,
        )
        return result.output


_default_classifier: AgentSeverityClassifier | None = None


def get_severity_classifier() -> SeverityClassifier:
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = AgentSeverityClassifier()
    return _default_classifier
