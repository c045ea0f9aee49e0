# tests/test_providers.py
import json

import pytest

from flowgen.ia.factory import IAProviderFactory
from flowgen.ia.prompts import build_generation_user_prompt, build_validation_prompt
from flowgen.ia.providers import MockIAProvider
from flowgen.ia_client import GenerationClient, ValidationClient


def test_factory_returns_mock_by_name():
    assert isinstance(IAProviderFactory.create_provider("MOCK"), MockIAProvider)
    assert IAProviderFactory.get_available_providers() == ["mock", "openai", "gemini"]


def test_factory_rejects_unknown_provider():
    with pytest.raises(ValueError, match="Unknown provider type"):
        IAProviderFactory.create_provider("claude-on-a-toaster")


def test_remote_provider_requires_api_key(monkeypatch):
    from flowgen.config import settings

    monkeypatch.setattr(settings, "openai_api_key", None)
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        IAProviderFactory.create_provider("openai")


def test_mock_builds_linear_workflow_from_mentions():
    raw = MockIAProvider().generate_workflow(
        "Every morning, read new rows from Google Sheets and post them to Slack",
        temperature=0.3,
        max_tokens=3000,
    )
    payload = json.loads(raw)
    nodes = payload["workflow"]["nodes"]

    assert [n["name"] for n in nodes] == ["Schedule Trigger", "Google Sheets", "Slack"]
    assert payload["nodeCount"] == 3
    assert payload["integrations"] == ["Google Sheets", "Slack"]
    assert payload["workflow"]["connections"]["Google Sheets"]["main"][0][0]["node"] == "Slack"
    assert nodes[2]["credentials"] == {"slackApi": "MySlackCredentials"}
    assert nodes[0]["position"][0] < nodes[1]["position"][0] < nodes[2]["position"][0]


def test_mock_output_passes_generation_client():
    result = GenerationClient(MockIAProvider()).generate("When a webhook fires, create a HubSpot contact")
    assert result.workflow.nodes[0].type == "n8n-nodes-base.webhook"
    assert result.node_count == 2


def test_mock_without_mentions_uses_manual_trigger_and_set():
    payload = json.loads(MockIAProvider().generate_workflow("Do something useful", temperature=0, max_tokens=10))
    assert [n["type"] for n in payload["workflow"]["nodes"]] == [
        "n8n-nodes-base.manualTrigger",
        "n8n-nodes-base.set",
    ]


def test_mock_validation_flags_empty_workflow_and_missing_credentials():
    mock = MockIAProvider()
    assert json.loads(mock.validate_workflow({"nodes": []}, temperature=0.1, max_tokens=1000))["valid"] is False

    report = ValidationClient(mock).validate({
        "nodes": [{"name": "Slack", "type": "n8n-nodes-base.slack"}],
        "connections": {},
    })
    assert report.valid is True
    assert "Node 'Slack' requires slackApi credentials" in report.suggestions
    assert "Add a trigger node so the workflow can start on its own" in report.suggestions


def test_prompts():
    assert build_generation_user_prompt("do X") == "Create an n8n workflow for: do X"
    prompt = build_validation_prompt({"nodes": []})
    assert '"nodes": []' in prompt
    assert "Authentication requirements" in prompt


def test_getter_returns_singleton_instance():
    from flowgen import ia_client as ia_mod

    ia_mod.set_ia_client(None)
    try:
        a = ia_mod.get_ia_client()
        b = ia_mod.get_ia_client()
        assert a is b
        assert a.provider.name == "mock"
    finally:
        ia_mod.set_ia_client(None)
