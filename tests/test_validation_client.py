# tests/test_validation_client.py
import json

import pytest

from flowgen.ia.services import LOOP_SUGGESTION
from flowgen.ia_client import VALIDATION_FAILED_MESSAGE, ValidationClient
from flowgen.models import N8nWorkflow

FAILED = {"valid": False, "errors": [VALIDATION_FAILED_MESSAGE], "suggestions": []}


@pytest.fixture()
def validator(provider):
    return ValidationClient(provider, temperature=0.1, max_tokens=1000)


def test_report_is_passed_through(validator, provider, sample_workflow):
    provider.validation_replies.append(json.dumps({"valid": True, "errors": [], "suggestions": ["Use IF"]}))
    report = validator.validate(sample_workflow)

    assert report.valid is True
    assert report.errors == []
    assert report.suggestions == ["Use IF"]
    assert provider.validation_calls[0]["temperature"] == 0.1
    assert provider.validation_calls[0]["max_tokens"] == 1000


def test_missing_fields_default(validator, provider, sample_workflow):
    provider.validation_replies.append("{}")
    report = validator.validate(sample_workflow)
    assert report.model_dump() == {"valid": False, "errors": [], "suggestions": []}


def test_accepts_workflow_model(validator, provider, sample_workflow):
    validator.validate(N8nWorkflow.model_validate(sample_workflow))
    sent = provider.validation_calls[0]["workflow"]
    assert isinstance(sent, dict)
    assert sent["nodes"][0]["name"] == "Gmail Trigger"


@pytest.mark.parametrize("failure", [
    ConnectionError("network down"),
    "this is not json",
    json.dumps({"valid": True, "errors": "none"}),
])
def test_any_failure_returns_fixed_report(validator, provider, sample_workflow, failure):
    provider.validation_replies.append(failure)
    assert validator.validate(sample_workflow).model_dump() == FAILED


def test_dangling_connection_target_marks_invalid(validator, provider, sample_workflow):
    sample_workflow["connections"]["Slack"] = {"main": [[{"node": "Ghost", "type": "main", "index": 0}]]}
    provider.validation_replies.append(json.dumps({"valid": True, "errors": [], "suggestions": []}))

    report = validator.validate(sample_workflow)

    assert report.valid is False
    assert any("Ghost" in e for e in report.errors)


def test_loop_back_is_a_suggestion_not_an_error(validator, provider):
    looping = {
        "nodes": [
            {"name": "Start", "type": "n8n-nodes-base.manualTrigger"},
            {"name": "Loop Over Items", "type": "n8n-nodes-base.splitInBatches"},
            {"name": "Fetch", "type": "n8n-nodes-base.httpRequest"},
        ],
        "connections": {
            "Start": {"main": [[{"node": "Loop Over Items", "type": "main", "index": 0}]]},
            "Loop Over Items": {"main": [[], [{"node": "Fetch", "type": "main", "index": 0}]]},
            "Fetch": {"main": [[{"node": "Loop Over Items", "type": "main", "index": 0}]]},
        },
    }
    provider.validation_replies.append(json.dumps({"valid": True}))

    report = validator.validate(looping)

    assert report.valid is True
    assert report.errors == []
    assert report.suggestions == [LOOP_SUGGESTION]


def test_arbitrary_input_does_not_raise(validator, provider):
    provider.validation_replies.append(json.dumps({"valid": False, "errors": ["No nodes"]}))
    report = validator.validate({"foo": "bar"})
    assert report.valid is False
    assert report.errors == ["No nodes"]
