# tests/test_api_client.py
"""
WorkflowApiClient driven against the real app through TestClient.
"""
import pytest
import requests

from flowgen.client.api import WorkflowApiClient, WorkflowApiError
from flowgen.client.errors import AI_LIMITATION_SUGGESTIONS, PARSING_MESSAGE
from flowgen.client.recents import RecentWorkflowsCache


@pytest.fixture()
def api(client, tmp_path):
    return WorkflowApiClient(
        base_url="",
        session=client,
        timeout=None,
        recents=RecentWorkflowsCache(tmp_path / "recent.json"),
    )


def test_generate_returns_data_and_records_recent(api):
    data = api.generate("Send me a Slack message for urgent email")

    assert data["workflowId"] == 1
    assert data["conversationId"] == "1"
    recent = api.recents.load()
    assert recent[0]["title"] == "Send me a Slack message for urgent email"
    assert recent[0]["description"] == data["explanation"]


def test_generate_threads_conversation(api):
    first = api.generate("Send me a Slack message for urgent email")
    api.generate("Also copy the email to Google Sheets", first["conversationId"])
    assert len(api.get_conversation(first["conversationId"])["messages"]) == 4


def test_parsing_failure_carries_guidance(api, provider):
    provider.generation_replies.append("definitely not json")

    with pytest.raises(WorkflowApiError) as exc_info:
        api.generate("Send me a Slack message for urgent email")

    error = exc_info.value
    assert error.status_code == 400
    assert error.analysis.user_friendly_message == PARSING_MESSAGE
    assert len(error.suggestions) == 4
    assert error.chat_message().startswith(PARSING_MESSAGE)
    assert "• Use simpler language to describe your automation" in error.chat_message()
    assert api.recents.load() == []


def test_refusal_failure_is_ai_limitation(api, provider):
    provider.generation_replies.append(RuntimeError("I'm not able to generate workflows of this size"))

    with pytest.raises(WorkflowApiError) as exc_info:
        api.generate("Build my entire company back office please")

    assert exc_info.value.analysis.is_ai_limitation
    assert exc_info.value.suggestions == AI_LIMITATION_SUGGESTIONS


def test_short_prompt_rejected(api):
    with pytest.raises(WorkflowApiError) as exc_info:
        api.generate("too short")
    assert exc_info.value.message == "Prompt must be at least 10 characters"


def test_network_error_is_classified():
    class DownSession:
        def request(self, method, url, **kwargs):
            raise requests.ConnectionError("network unreachable")

    api = WorkflowApiClient(session=DownSession())
    with pytest.raises(WorkflowApiError) as exc_info:
        api.generate("Send me a Slack message for urgent email")
    assert exc_info.value.analysis.is_network_error


def test_read_endpoints(api, sample_workflow):
    created = api.generate("Send me a Slack message for urgent email")

    assert [w["id"] for w in api.recent_workflows(5)] == [created["workflowId"]]
    assert api.get_workflow(created["workflowId"])["title"] == "Send slack message urgent Automation"
    assert len(api.templates()) == 5
    assert api.templates("Social Media")[0]["name"] == "Social Media Automation"
    assert api.get_template(2)["name"] == "Data Synchronization"
    assert api.nodes(category="Communication")
    assert api.validate(sample_workflow)["valid"] is True
    assert api.analyze(sample_workflow)["level"] == "Simple"
    assert api.metrics()["workflows_generated"] == 1


def test_missing_workflow_raises_not_found(api):
    with pytest.raises(WorkflowApiError) as exc_info:
        api.get_workflow(77)
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Workflow not found"


def test_prose_refusal_is_classified_from_raw_reply(api, provider):
    refusal = "I cannot fully generate this workflow because it needs custom code."
    provider.generation_replies.append(refusal)

    with pytest.raises(WorkflowApiError) as exc_info:
        api.generate("Build my entire company back office please")

    error = exc_info.value
    assert "Invalid JSON in model response" in error.message
    assert error.ai_response == refusal
    assert error.analysis.is_ai_limitation
    assert error.suggestions == AI_LIMITATION_SUGGESTIONS
