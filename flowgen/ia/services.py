# flowgen/ia/services.py
"""
Workflow analysis services.

- Graph analysis over the n8n connection map (dangling references and
  loops), used by the structural pass of the validation client.
- Complexity heuristic exposed at POST /api/analyze-workflow.
"""
from collections import defaultdict, deque
from typing import Any, Dict, List, Set, Tuple

from ..models import ComplexityAnalysis, ComplexityFactors, N8nWorkflow

LOOP_SUGGESTION = "Workflow connections loop back; make sure every loop has an exit condition"


class WorkflowGraphAnalyzer:
    """
    Graph view of an n8n workflow.

    Nodes are keyed by name, as n8n connections are. Works on raw dicts so
    it can inspect configurations that would not pass model validation.
    """

    def __init__(self, definition: Dict[str, Any]):
        self.definition = definition if isinstance(definition, dict) else {}
        self.nodes = self._extract_nodes()
        self.node_names: Set[str] = {n["name"] for n in self.nodes if isinstance(n.get("name"), str)}
        self.edges = self._extract_edges()
        self.adjacency_list = self._build_adjacency_list()

    def _extract_nodes(self) -> List[Dict[str, Any]]:
        nodes = self.definition.get("nodes", [])
        if not isinstance(nodes, list):
            return []
        return [n for n in nodes if isinstance(n, dict)]

    def _extract_edges(self) -> List[Tuple[str, str]]:
        """(source, target) pairs across every port and output index."""
        edges = []
        connections = self.definition.get("connections", {})
        if not isinstance(connections, dict):
            return edges
        for source, ports in connections.items():
            if not isinstance(ports, dict):
                continue
            for outputs in ports.values():
                if not isinstance(outputs, list):
                    continue
                for targets in outputs:
                    for target in targets if isinstance(targets, list) else []:
                        if isinstance(target, dict) and isinstance(target.get("node"), str):
                            edges.append((source, target["node"]))
        return edges

    def _build_adjacency_list(self) -> Dict[str, List[str]]:
        adj_list = defaultdict(list)
        for source, target in self.edges:
            if source in self.node_names and target in self.node_names:
                adj_list[source].append(target)
        return adj_list

    def dangling_references(self) -> List[str]:
        """Messages for connection ends that name no node in the workflow."""
        problems = []
        seen_sources = set()
        for source, target in self.edges:
            if source not in self.node_names and source not in seen_sources:
                seen_sources.add(source)
                problems.append(f"Connection source '{source}' does not match any node")
            if target not in self.node_names:
                problems.append(f"Connection from '{source}' targets unknown node '{target}'")
        return problems

    def detect_cycles(self) -> bool:
        """Kahn's algorithm: a cycle leaves nodes with non-zero in-degree."""
        in_degree = {name: 0 for name in self.node_names}
        for targets in self.adjacency_list.values():
            for target in targets:
                in_degree[target] += 1

        queue = deque(name for name, degree in in_degree.items() if degree == 0)
        visited = 0
        while queue:
            node = queue.popleft()
            visited += 1
            for neighbor in self.adjacency_list.get(node, []):
                in_degree[neighbor] -= 1
                if in_degree[neighbor] == 0:
                    queue.append(neighbor)

        return visited != len(self.node_names)

    def structural_errors(self) -> List[str]:
        return self.dangling_references()

    def structural_suggestions(self) -> List[str]:
        # n8n allows loops, e.g. SplitInBatches feeding back into itself
        if self.detect_cycles():
            return [LOOP_SUGGESTION]
        return []


class ComplexityAnalyzer:
    """
    Scores how hard a workflow is to set up (0-100).

    Node types are matched by substring and case-sensitively, so only
    camel-cased markers ("googleCalendarTrigger", "respondToWebhook") count.
    """

    CONDITIONAL_MARKERS = ("If", "Switch", "Merge", "Router")
    ERROR_MARKERS = ("ErrorTrigger", "StopAndError")
    TRANSFORM_MARKERS = ("Code", "Function", "Set", "Edit", "Transform")
    ASYNC_MARKERS = ("Webhook", "Trigger", "Wait", "Schedule")

    # (upper bound, level, setup time, skill level)
    LEVELS = [
        (25, "Simple", "5-15 minutes", "Beginner friendly"),
        (50, "Moderate", "15-45 minutes", "Basic n8n knowledge"),
        (75, "Complex", "45 minutes - 2 hours", "Intermediate experience"),
        (100, "Advanced", "2+ hours", "Advanced n8n user"),
    ]

    def analyze(self, workflow: N8nWorkflow) -> ComplexityAnalysis:
        nodes = workflow.nodes
        types = [n.type for n in nodes]

        factors = ComplexityFactors(
            node_count=len(nodes),
            # Distinct package prefixes ("n8n-nodes-base", "@n8n/...").
            integration_count=len({t.split(".")[0] for t in types}),
            conditional_logic=self._count(types, self.CONDITIONAL_MARKERS),
            error_handling=sum(
                1 for n in nodes
                if any(m in n.type for m in self.ERROR_MARKERS) or n.parameters.get("continueOnFail")
            ),
            data_transformation=self._count(types, self.TRANSFORM_MARKERS),
            async_operations=self._count(types, self.ASYNC_MARKERS),
        )

        score = min(factors.node_count * 3, 30)
        score += min(factors.integration_count * 8, 24)
        score += factors.conditional_logic * 12
        score += factors.error_handling * 8
        score += factors.data_transformation * 10
        score += factors.async_operations * 6
        score = min(score, 100)

        _, level, setup_time, skill = next(entry for entry in self.LEVELS if score <= entry[0])

        return ComplexityAnalysis(
            score=score,
            level=level,
            factors=factors,
            estimated_setup_time=setup_time,
            skill_level=skill,
            recommendations=self._recommendations(factors),
        )

    @staticmethod
    def _count(types: List[str], markers: Tuple[str, ...]) -> int:
        return sum(1 for t in types if any(m in t for m in markers))

    @staticmethod
    def _recommendations(factors: ComplexityFactors) -> List[str]:
        recommendations = []
        if factors.node_count > 10:
            recommendations.append("Consider breaking this into smaller, focused workflows")
        if factors.integration_count > 5:
            recommendations.append("Test each integration connection before running the full workflow")
        if factors.conditional_logic > 2:
            recommendations.append("Document your conditional logic for easier maintenance")
        if factors.error_handling == 0 and factors.node_count > 3:
            recommendations.append("Add error handling for more robust automation")
        if factors.data_transformation > 3:
            recommendations.append("Consider using reusable functions for complex transformations")
        if factors.async_operations > 2:
            recommendations.append("Plan for proper timing and coordination between async operations")
        if not recommendations:
            recommendations.append("This workflow looks well-structured and ready to implement")
        return recommendations
