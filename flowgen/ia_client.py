# flowgen/ia_client.py
"""
Model-facing clients for the generation pipeline.

- GenerationClient: natural-language request -> schema-checked workflow.
  Failures are raised as GenerationFailure.
- ValidationClient: workflow -> advisory report. Never raises.
- IAClient: both clients behind one provider, with observers attached.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from .config import settings
from .errors import GenerationFailure, ValidationFailure
from .ia.factory import IAProviderFactory
from .ia.observers import LogObserver, MetricsObserver, WorkflowSubject
from .ia.providers import IAProviderStrategy, extract_json
from .ia.services import WorkflowGraphAnalyzer
from .models import GeneratedPayload, GenerationResult, N8nWorkflow, ValidationPayload, ValidationReport

logger = logging.getLogger(__name__)

DEFAULT_EXPLANATION = "Workflow generated successfully"
VALIDATION_FAILED_MESSAGE = "Failed to validate workflow"


class GenerationClient:
    """Turns a request into a workflow with one provider call."""

    def __init__(
        self,
        provider: IAProviderStrategy,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        self.provider = provider
        self.temperature = settings.generation_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.generation_max_tokens

    def generate(self, prompt: str) -> GenerationResult:
        """
        Raises:
            GenerationFailure: provider error, unparseable reply, or a reply
                whose shape does not match the expected schema.
        """
        try:
            raw = self.provider.generate_workflow(prompt, temperature=self.temperature, max_tokens=self.max_tokens)
        except Exception as exc:
            logger.error("Provider %s failed during generation: %s", self.provider.name, exc)
            raise GenerationFailure(f"Failed to generate workflow: {exc}") from exc

        try:
            data = json.loads(extract_json(raw))
        except json.JSONDecodeError as exc:
            raise GenerationFailure(
                f"Failed to generate workflow: Invalid JSON in model response ({exc.msg})",
                raw_response=raw,
            ) from exc

        if not isinstance(data, dict):
            raise GenerationFailure(
                "Failed to generate workflow: Invalid workflow structure (expected a JSON object)",
                raw_response=raw,
            )

        try:
            payload = GeneratedPayload.model_validate(data)
        except ValidationError as exc:
            first = exc.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            raise GenerationFailure(
                f"Failed to generate workflow: Invalid workflow structure ({location}: {first['msg']})",
                raw_response=raw,
            ) from exc

        return GenerationResult(
            workflow=payload.workflow,
            explanation=payload.explanation or DEFAULT_EXPLANATION,
            node_count=payload.node_count if (payload.node_count or 0) > 0 else len(payload.workflow.nodes),
            integrations=payload.integrations or [],
            suggestions=payload.suggestions or [],
            assumptions=payload.assumptions_made or [],
            pitfalls=payload.potential_pitfalls or [],
        )


class ValidationClient:
    """Advisory review of a workflow: model opinion plus a local structural pass."""

    def __init__(
        self,
        provider: IAProviderStrategy,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ):
        self.provider = provider
        self.temperature = settings.validation_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or settings.validation_max_tokens

    def validate(self, workflow: Union[N8nWorkflow, Dict[str, Any], Any]) -> ValidationReport:
        if isinstance(workflow, N8nWorkflow):
            workflow = workflow.model_dump(mode="json", by_alias=True, exclude_none=True)

        try:
            report = self._ask_provider(workflow)
        except Exception as exc:
            logger.warning("Workflow validation failed: %s", exc)
            return ValidationReport(valid=False, errors=[VALIDATION_FAILED_MESSAGE], suggestions=[])

        graph = WorkflowGraphAnalyzer(workflow)
        structural = graph.structural_errors()
        if structural:
            report.errors.extend(structural)
            report.valid = False
        report.suggestions.extend(s for s in graph.structural_suggestions() if s not in report.suggestions)
        return report

    def _ask_provider(self, workflow: Any) -> ValidationReport:
        raw = self.provider.validate_workflow(workflow, temperature=self.temperature, max_tokens=self.max_tokens)
        try:
            data = json.loads(extract_json(raw))
            payload = ValidationPayload.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as exc:
            raise ValidationFailure(f"Unreadable validation reply: {exc}") from exc

        return ValidationReport(
            valid=bool(payload.valid),
            errors=payload.errors or [],
            suggestions=payload.suggestions or [],
        )


# --------------------------------------------------------------------------------------
# Singleton via getter: the live instance is kept in a module symbol and
# created lazily. Tests swap it with set_ia_client().
# --------------------------------------------------------------------------------------
_instance: Optional["IAClient"] = None


def get_ia_client() -> "IAClient":
    global _instance
    if _instance is None:
        _instance = IAClient()
    return _instance


def set_ia_client(client: Optional["IAClient"]) -> None:
    global _instance
    _instance = client


class IAClient:
    """
    One provider shared by the generation and validation clients.

    Every call is published to the attached observers (logging, metrics).
    """

    def __init__(self, provider: Optional[IAProviderStrategy] = None):
        self.provider = provider or IAProviderFactory.create_from_config()
        self.generation = GenerationClient(self.provider)
        self.validation = ValidationClient(self.provider)

        self.subject = WorkflowSubject()
        self.log_observer = LogObserver(verbose=settings.app_env == "dev")
        self.metrics_observer = MetricsObserver()
        self.subject.attach(self.log_observer)
        self.subject.attach(self.metrics_observer)

    def generate(self, prompt: str) -> GenerationResult:
        try:
            return self.generation.generate(prompt)
        except GenerationFailure as exc:
            self.subject.notify_generation_failed(exc.message)
            raise

    def validate(self, workflow: Any, workflow_id: Optional[int] = None) -> ValidationReport:
        report = self.validation.validate(workflow)
        self.subject.notify_validation(workflow_id, report.valid, len(report.errors))
        return report

    def get_metrics(self) -> Dict[str, Any]:
        metrics = self.metrics_observer.get_metrics()
        metrics["provider"] = self.provider.name
        return metrics
