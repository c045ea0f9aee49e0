# flowgen/ia/observers.py
"""
Observer Pattern: monitoring of the generation pipeline.

The IA client and the generation service publish an event for every generation
attempt and every validation; observers turn them into log lines and counters.
"""
import logging
import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

GENERATION = "generation"
GENERATION_FAILED = "generation_failed"
VALIDATION = "validation"


class WorkflowEvent:
    """One thing that happened to a workflow (id is None before it is stored)."""

    def __init__(self, event_type: str, workflow_id: Optional[int], data: Dict[str, Any]):
        self.event_type = event_type
        self.workflow_id = workflow_id
        self.data = data
        self.timestamp = datetime.now(UTC).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "workflow_id": self.workflow_id,
            "data": self.data,
            "timestamp": self.timestamp,
        }


class WorkflowObserver(ABC):

    @abstractmethod
    def update(self, event: WorkflowEvent) -> None:
        """Receives one event."""


class LogObserver(WorkflowObserver):
    """Writes every event to the module logger."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def update(self, event: WorkflowEvent) -> None:
        if event.event_type == GENERATION_FAILED:
            logger.warning("Workflow generation failed: %s", event.data.get("error"))
        elif self.verbose:
            logger.info("Workflow event %s", event.to_dict())
        else:
            logger.debug("%s workflow=%s", event.event_type, event.workflow_id)


class MetricsObserver(WorkflowObserver):
    """Counts events. Read through GET /api/ia/metrics."""

    def __init__(self):
        self._lock = threading.Lock()
        self.reset_metrics()

    def update(self, event: WorkflowEvent) -> None:
        with self._lock:
            self._metrics["total_events"] += 1
            by_type = self._metrics["events_by_type"]
            by_type[event.event_type] = by_type.get(event.event_type, 0) + 1

            if event.event_type == GENERATION:
                self._metrics["workflows_generated"] += 1
                self._metrics["nodes_generated"] += event.data.get("node_count", 0)
            elif event.event_type == GENERATION_FAILED:
                self._metrics["generation_failures"] += 1
            elif event.event_type == VALIDATION and not event.data.get("valid", False):
                self._metrics["invalid_workflows"] += 1

    def get_metrics(self) -> Dict[str, Any]:
        with self._lock:
            metrics = dict(self._metrics)
            metrics["events_by_type"] = dict(self._metrics["events_by_type"])
        return metrics

    def reset_metrics(self) -> None:
        with self._lock:
            self._metrics: Dict[str, Any] = {
                "total_events": 0,
                "events_by_type": {},
                "workflows_generated": 0,
                "nodes_generated": 0,
                "generation_failures": 0,
                "invalid_workflows": 0,
            }


class WorkflowSubject:
    """Keeps the observer list and fans events out to it."""

    def __init__(self):
        self._observers: List[WorkflowObserver] = []

    def attach(self, observer: WorkflowObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def notify(self, event: WorkflowEvent) -> None:
        for observer in self._observers:
            observer.update(event)

    def notify_generation(self, workflow_id: int, node_count: int, integrations: List[str]) -> None:
        self.notify(WorkflowEvent(
            event_type=GENERATION,
            workflow_id=workflow_id,
            data={"node_count": node_count, "integrations": integrations},
        ))

    def notify_generation_failed(self, error_message: str) -> None:
        self.notify(WorkflowEvent(event_type=GENERATION_FAILED, workflow_id=None, data={"error": error_message}))

    def notify_validation(self, workflow_id: Optional[int], valid: bool, error_count: int) -> None:
        self.notify(WorkflowEvent(
            event_type=VALIDATION,
            workflow_id=workflow_id,
            data={"valid": valid, "error_count": error_count},
        ))
