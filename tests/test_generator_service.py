# tests/test_generator_service.py
import json
import logging

import pytest

from flowgen.errors import GenerationFailure
from flowgen.services.generator import derive_title

PROMPT = "Send me a Slack message when I receive emails from my boss"


@pytest.mark.parametrize("prompt, expected", [
    (PROMPT, "Send slack message receive Automation"),
    ("Sync new Airtable records to Google Sheets every hour", "Sync airtable records google Automation"),
    ("do it now", "Untitled Automation"),
    ("When this is from that", "Untitled Automation"),
])
def test_derive_title(prompt, expected):
    assert derive_title(prompt) == expected


def test_title_always_ends_with_automation():
    for prompt in ("a b c d e f g h i j", "Notify the sales team about large orders", "x" * 40):
        title = derive_title(prompt)
        assert title.endswith(" Automation")
        assert title[0].isupper()


def test_generate_persists_and_returns_ids(service, repo):
    out = service.generate(PROMPT)

    stored = repo.get_workflow(out.workflow_id)
    assert stored is not None
    assert stored.title == "Send slack message receive Automation"
    assert stored.user_prompt == PROMPT
    assert stored.description == out.explanation
    assert stored.node_count == 2
    assert stored.integrations == ["Gmail", "Slack"]
    assert isinstance(out.conversation_id, str)


def test_suggestions_are_generation_then_validation(service, provider):
    provider.validation_replies.append(json.dumps({"valid": True, "errors": [], "suggestions": ["V1", "V2"]}))
    out = service.generate(PROMPT)
    assert out.suggestions == ["Filter by sender", "V1", "V2"]


def test_new_conversation_has_two_turns_linked_to_workflow(service, repo):
    out = service.generate(PROMPT)
    conversation = repo.get_conversation(int(out.conversation_id))

    assert conversation.workflow_id == out.workflow_id
    assert [m.role for m in conversation.messages] == ["user", "assistant"]
    assert conversation.messages[0].content == PROMPT
    assert conversation.messages[1].content == out.explanation
    assert conversation.messages[1].workflow_data is not None
    assert conversation.messages[0].id.startswith("msg_")


def test_existing_conversation_grows_by_two_per_call(service, repo):
    first = service.generate(PROMPT)
    second = service.generate("Also post the email subject to Discord", first.conversation_id)
    third = service.generate("And log it to Google Sheets please", first.conversation_id)

    assert second.conversation_id == first.conversation_id == third.conversation_id
    conversation = repo.get_conversation(int(first.conversation_id))
    assert len(conversation.messages) == 6
    assert conversation.messages[2].content == "Also post the email subject to Discord"


@pytest.mark.parametrize("conversation_id", ["999", "not-a-number", ""])
def test_unknown_conversation_starts_a_new_one(service, repo, conversation_id):
    out = service.generate(PROMPT, conversation_id)
    conversation = repo.get_conversation(int(out.conversation_id))
    assert out.conversation_id != conversation_id
    assert len(conversation.messages) == 2


def test_generation_failure_persists_nothing(service, repo, provider):
    provider.generation_replies.append("not json at all")

    with pytest.raises(GenerationFailure):
        service.generate(PROMPT)

    assert repo.get_recent_workflows(10) == []
    assert provider.validation_calls == []


def test_validation_failure_is_advisory(service, provider):
    provider.validation_replies.append(RuntimeError("validator down"))
    out = service.generate(PROMPT)

    assert out.suggestions == ["Filter by sender"]
    assert out.validation.errors == ["Failed to validate workflow"]


def test_generate_publishes_metrics(service, ia, provider):
    service.generate(PROMPT)
    provider.generation_replies.append("oops")
    with pytest.raises(GenerationFailure):
        service.generate(PROMPT)

    metrics = ia.get_metrics()
    assert metrics["workflows_generated"] == 1
    assert metrics["generation_failures"] == 1
    assert metrics["events_by_type"]["validation"] == 1
    assert metrics["provider"] == "scripted"


def test_read_helpers(service):
    out = service.generate(PROMPT)

    assert service.get_workflow(out.workflow_id).id == out.workflow_id
    assert service.get_conversation(int(out.conversation_id)) is not None
    assert [w.id for w in service.get_recent_workflows(5)] == [out.workflow_id]
    assert len(service.get_templates()) == 5
    assert [t.name for t in service.get_templates("Social Media")] == ["Social Media Automation"]
    assert service.get_template(1).name == "Email to Slack Automation"
    assert service.get_template(42) is None


def test_verbose_log_observer_writes_event_payload(caplog):
    from flowgen.ia.observers import LogObserver, WorkflowSubject

    subject = WorkflowSubject()
    subject.attach(LogObserver(verbose=True))
    with caplog.at_level(logging.INFO, logger="flowgen.ia.observers"):
        subject.notify_generation(7, 3, ["Slack"])

    assert "'event_type': 'generation'" in caplog.text
    assert "'workflow_id': 7" in caplog.text
    assert "'integrations': ['Slack']" in caplog.text
