# tests/conftest.py
import json
from typing import Any, Dict, List, Union

import pytest
from fastapi.testclient import TestClient

from flowgen.deps import get_ia, get_repository
from flowgen.ia.providers import IAProviderStrategy
from flowgen.ia_client import IAClient
from flowgen.main import app
from flowgen.repository import InMemoryRepository
from flowgen.services.generator import WorkflowGeneratorService


SAMPLE_WORKFLOW: Dict[str, Any] = {
    "nodes": [
        {
            "id": "1",
            "name": "Gmail Trigger",
            "type": "n8n-nodes-base.gmail",
            "position": [240, 300],
            "parameters": {"operation": "trigger"},
        },
        {
            "id": "2",
            "name": "Slack",
            "type": "n8n-nodes-base.slack",
            "position": [460, 300],
            "parameters": {"channel": "#alerts", "text": "={{ $json.subject }}"},
        },
    ],
    "connections": {"Gmail Trigger": {"main": [[{"node": "Slack", "type": "main", "index": 0}]]}},
    "active": False,
    "settings": {},
}


def generation_reply(**overrides) -> str:
    payload: Dict[str, Any] = {
        "workflow": SAMPLE_WORKFLOW,
        "explanation": "Forwards matching emails to Slack.",
        "assumptionsMade": ["The Slack channel already exists"],
        "nodeCount": 2,
        "integrations": ["Gmail", "Slack"],
        "suggestions": ["Filter by sender"],
        "potentialPitfalls": ["Gmail polling delay"],
    }
    payload.update(overrides)
    return json.dumps({k: v for k, v in payload.items() if v is not ...})


class ScriptedProvider(IAProviderStrategy):
    """Replies with queued texts (or raises queued exceptions) and records every call."""

    name = "scripted"

    def __init__(self):
        self.generation_replies: List[Union[str, Exception]] = []
        self.validation_replies: List[Union[str, Exception]] = []
        self.generation_calls: List[Dict[str, Any]] = []
        self.validation_calls: List[Dict[str, Any]] = []

    def generate_workflow(self, prompt, *, temperature, max_tokens):
        self.generation_calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        reply = self.generation_replies.pop(0) if self.generation_replies else generation_reply()
        if isinstance(reply, Exception):
            raise reply
        return reply

    def validate_workflow(self, workflow, *, temperature, max_tokens):
        self.validation_calls.append({"workflow": workflow, "temperature": temperature, "max_tokens": max_tokens})
        reply = (
            self.validation_replies.pop(0) if self.validation_replies
            else json.dumps({"valid": True, "errors": [], "suggestions": ["Add error handling"]})
        )
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture()
def sample_workflow() -> Dict[str, Any]:
    return json.loads(json.dumps(SAMPLE_WORKFLOW))


@pytest.fixture()
def reply():
    """Factory for generation replies; pass key=... to drop a key."""
    return generation_reply


@pytest.fixture()
def provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture()
def repo() -> InMemoryRepository:
    return InMemoryRepository()


@pytest.fixture()
def ia(provider) -> IAClient:
    return IAClient(provider)


@pytest.fixture()
def service(repo, ia) -> WorkflowGeneratorService:
    return WorkflowGeneratorService(repo, ia)


@pytest.fixture()
def client(repo, ia):
    """TestClient with a fresh repository and the scripted provider."""
    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_ia] = lambda: ia
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
