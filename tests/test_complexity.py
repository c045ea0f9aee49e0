# tests/test_complexity.py
from flowgen.ia.services import LOOP_SUGGESTION, ComplexityAnalyzer, WorkflowGraphAnalyzer
from flowgen.models import N8nWorkflow


def _wf(*types, **params):
    return N8nWorkflow(nodes=[
        {"name": f"N{i}", "type": t, "parameters": params if i == 0 else {}} for i, t in enumerate(types)
    ])


def test_small_workflow_is_simple(sample_workflow):
    analysis = ComplexityAnalyzer().analyze(N8nWorkflow.model_validate(sample_workflow))

    # 2 nodes * 3 + 1 prefix * 8
    assert analysis.score == 14
    assert analysis.level == "Simple"
    assert analysis.estimated_setup_time == "5-15 minutes"
    assert analysis.skill_level == "Beginner friendly"
    assert analysis.recommendations == ["This workflow looks well-structured and ready to implement"]


def test_factor_counting():
    analysis = ComplexityAnalyzer().analyze(_wf(
        "n8n-nodes-base.googleCalendarTrigger",
        "n8n-nodes-base.respondToWebhook",
        "n8n-nodes-base.splitInBatches",
        "n8n-nodes-base.errorTrigger",
        "@n8n/n8n-nodes-langchain.openAi",
    ))
    factors = analysis.factors
    assert factors.node_count == 5
    assert factors.integration_count == 2
    assert factors.async_operations == 3  # calendar trigger, webhook, error trigger
    assert factors.error_handling == 0  # "errorTrigger" is not camel-cased "ErrorTrigger"
    assert factors.conditional_logic == 0
    # 15 + 16 + 18
    assert analysis.score == 49
    assert analysis.level == "Moderate"
    assert "Add error handling for more robust automation" in analysis.recommendations
    assert "Plan for proper timing and coordination between async operations" in analysis.recommendations


def test_continue_on_fail_counts_as_error_handling():
    analysis = ComplexityAnalyzer().analyze(_wf("n8n-nodes-base.slack", continueOnFail=True))
    assert analysis.factors.error_handling == 1


def test_score_is_capped_and_advanced():
    types = ["n8n-nodes-base.mergeIfSwitch"] * 12
    analysis = ComplexityAnalyzer().analyze(_wf(*types))
    assert analysis.score == 100
    assert analysis.level == "Advanced"
    assert analysis.estimated_setup_time == "2+ hours"
    assert "Consider breaking this into smaller, focused workflows" in analysis.recommendations
    assert "Document your conditional logic for easier maintenance" in analysis.recommendations


def test_graph_reports_dangling_references(sample_workflow):
    sample_workflow["connections"]["Ghost"] = {"main": [[{"node": "Slack"}]]}
    sample_workflow["connections"]["Slack"] = {"main": [[{"node": "Nowhere"}]]}

    problems = WorkflowGraphAnalyzer(sample_workflow).dangling_references()
    assert "Connection source 'Ghost' does not match any node" in problems
    assert "Connection from 'Slack' targets unknown node 'Nowhere'" in problems


def test_graph_detects_cycles(sample_workflow):
    graph = WorkflowGraphAnalyzer(sample_workflow)
    assert not graph.detect_cycles()

    sample_workflow["connections"]["Slack"] = {"main": [[{"node": "Gmail Trigger"}]]}
    looping = WorkflowGraphAnalyzer(sample_workflow)
    assert looping.detect_cycles()
    assert looping.structural_errors() == []
    assert looping.structural_suggestions() == [LOOP_SUGGESTION]


def test_graph_tolerates_garbage():
    graph = WorkflowGraphAnalyzer({"nodes": "x", "connections": [1, 2]})
    assert graph.structural_errors() == []
    assert WorkflowGraphAnalyzer(None).structural_errors() == []
