# flowgen/ia/providers.py
"""
Strategy Pattern: interchangeable model providers.

Every provider answers the two questions the pipeline asks (build a workflow,
review a workflow) and returns the model's raw text. Parsing and shape checks
live in `flowgen.ia_client`, so a provider never decides what counts as a
valid workflow.
"""
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from ..data.nodes import get_node_by_type
from ..models import NodeDescriptor
from .prompts import GENERATION_SYSTEM_PROMPT, build_generation_user_prompt, build_validation_prompt

logger = logging.getLogger(__name__)


class IAProviderStrategy(ABC):
    """Common interface for every model provider."""

    name = "base"

    @abstractmethod
    def generate_workflow(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        """
        Asks the model for a workflow.

        Returns:
            Raw model text expected to hold one JSON object with keys
            workflow, explanation, assumptionsMade, nodeCount, integrations,
            suggestions and potentialPitfalls.
        """

    @abstractmethod
    def validate_workflow(self, workflow: Any, *, temperature: float, max_tokens: int) -> str:
        """
        Asks the model to review a workflow.

        Returns:
            Raw model text expected to hold {"valid", "errors", "suggestions"}.
        """


def extract_json(text: str) -> str:
    """Pulls the JSON object out of a reply that may carry markdown or prose."""
    if not text or not text.strip():
        return "{}"

    block = re.search(r"```(?:json)?\s*\n(.*?)\n```", text, re.DOTALL)
    if block:
        return block.group(1).strip()

    # Balanced braces from the first "{", ignoring braces inside strings.
    start = text.find("{")
    if start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1].strip()

    return text.strip()


# ============================================================================
# Mock
# ============================================================================

_TRIGGER_KEYWORDS: List[Tuple[Tuple[str, ...], str]] = [
    (("every ", "hourly", "daily", "weekly", "schedule", "each morning", "each day"), "n8n-nodes-base.cron"),
    (("webhook", "form submission", "form ", "http request comes", "api call"), "n8n-nodes-base.webhook"),
]

_INTEGRATION_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "n8n-nodes-base.gmail": ("gmail", "email", "e-mail"),
    "n8n-nodes-base.slack": ("slack",),
    "n8n-nodes-base.discord": ("discord",),
    "n8n-nodes-base.googleSheets": ("google sheets", "spreadsheet", "sheet"),
    "n8n-nodes-base.airtable": ("airtable",),
    "n8n-nodes-base.notion": ("notion",),
    "n8n-nodes-base.googleDrive": ("google drive", "drive"),
    "n8n-nodes-base.dropbox": ("dropbox",),
    "n8n-nodes-base.hubspot": ("hubspot", "crm"),
    "n8n-nodes-base.twitter": ("twitter", "tweet"),
    "n8n-nodes-base.httpRequest": ("api", "http", "url"),
    "n8n-nodes-base.if": (" if ", "only when", "containing", "contains"),
    "n8n-nodes-base.code": ("process", "transform", "calculate"),
}

_X_START = 240
_X_STEP = 220
_Y = 300


class MockIAProvider(IAProviderStrategy):
    """
    Deterministic provider for local runs and tests.

    Builds a linear workflow (trigger first) from the catalog nodes whose
    keywords appear in the request. No external calls.
    """

    name = "mock"

    def generate_workflow(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        text = f" {prompt.lower()} "

        trigger_type = "n8n-nodes-base.manualTrigger"
        for keywords, node_type in _TRIGGER_KEYWORDS:
            if any(k in text for k in keywords):
                trigger_type = node_type
                break

        # Order actions by where they are first mentioned in the request.
        mentioned: List[Tuple[int, str]] = []
        for node_type, keywords in _INTEGRATION_KEYWORDS.items():
            hits = [text.find(k) for k in keywords if k in text]
            if hits:
                mentioned.append((min(hits), node_type))
        action_types = [t for _, t in sorted(mentioned)]
        if not action_types:
            action_types = ["n8n-nodes-base.set"]

        descriptors = [get_node_by_type(trigger_type)] + [get_node_by_type(t) for t in action_types]
        nodes = [self._node(d, i) for i, d in enumerate(descriptors) if d is not None]

        connections = {}
        for source, target in zip(nodes, nodes[1:]):
            connections[source["name"]] = {"main": [[{"node": target["name"], "type": "main", "index": 0}]]}

        integrations = [d.name for d in descriptors[1:] if d is not None and d.category not in ("Logic", "Trigger")]
        needs_credentials = [n["name"] for n in nodes if "credentials" in n]
        suggestions = [f"Configure the {name} credentials in your n8n instance" for name in needs_credentials]
        suggestions.append("Add an Error Trigger workflow to get notified when an execution fails")

        payload = {
            "workflow": {
                "name": prompt[:60],
                "nodes": nodes,
                "connections": connections,
                "active": False,
                "settings": {},
            },
            "explanation": (
                f"This workflow starts with a {nodes[0]['name']} node and then runs "
                + ", ".join(n["name"] for n in nodes[1:])
                + " in sequence."
            ),
            "assumptionsMade": [
                "Default placeholder values are used for every unspecified parameter",
                "Steps run sequentially from left to right",
            ],
            "nodeCount": len(nodes),
            "integrations": integrations,
            "suggestions": suggestions,
            "potentialPitfalls": ["Placeholder parameters must be replaced before activating the workflow"],
        }
        return json.dumps(payload)

    @staticmethod
    def _node(descriptor: NodeDescriptor, index: int) -> Dict[str, Any]:
        node: Dict[str, Any] = {
            "id": f"node-{index + 1}",
            "name": descriptor.name,
            "type": descriptor.type,
            "position": [_X_START + index * _X_STEP, _Y],
            "parameters": dict(descriptor.parameters),
        }
        if descriptor.credentials:
            node["credentials"] = {descriptor.credentials[0]: f"My{descriptor.name.replace(' ', '')}Credentials"}
        return node

    def validate_workflow(self, workflow: Any, *, temperature: float, max_tokens: int) -> str:
        nodes = workflow.get("nodes", []) if isinstance(workflow, dict) else []
        errors: List[str] = []
        suggestions: List[str] = []

        if not nodes:
            errors.append("Workflow has no nodes")

        for node in nodes:
            if not isinstance(node, dict):
                errors.append("Every node must be an object")
                continue
            descriptor = get_node_by_type(str(node.get("type", "")))
            if descriptor and descriptor.credentials and not node.get("credentials"):
                suggestions.append(f"Node '{node.get('name')}' requires {descriptor.credentials[0]} credentials")

        if nodes and not any("Trigger" in str(n.get("type", "")) or n.get("type") in (
                "n8n-nodes-base.webhook", "n8n-nodes-base.cron") for n in nodes if isinstance(n, dict)):
            suggestions.append("Add a trigger node so the workflow can start on its own")

        return json.dumps({"valid": not errors, "errors": errors, "suggestions": suggestions})


# ============================================================================
# OpenAI
# ============================================================================

class OpenAIProvider(IAProviderStrategy):
    """Provider backed by the OpenAI chat completions API (JSON mode)."""

    name = "openai"

    def __init__(self, api_key: Optional[str] = None, model: str = "gpt-4o", timeout: Optional[float] = None):
        from openai import OpenAI

        if not api_key:
            raise ValueError("OpenAI API key not found. Set OPENAI_API_KEY.")

        self.model = model
        self.client = OpenAI(api_key=api_key, timeout=timeout)

    def _call_openai(self, system_prompt: Optional[str], user_prompt: str, temperature: float, max_tokens: int) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})

        params: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "response_format": {"type": "json_object"},
        }
        # Reasoning models only take the default temperature and count their
        # hidden reasoning against max_completion_tokens.
        if self.model.startswith(("o1", "o3", "o4", "gpt-5")):
            params["max_completion_tokens"] = max_tokens
        else:
            params["temperature"] = temperature
            params["max_tokens"] = max_tokens

        response = self.client.chat.completions.create(**params)
        content = response.choices[0].message.content or ""
        if not content:
            logger.warning("Empty content from OpenAI (finish_reason=%s)", response.choices[0].finish_reason)
        logger.debug("Received %d characters from OpenAI", len(content))
        return content

    def generate_workflow(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        return self._call_openai(GENERATION_SYSTEM_PROMPT, build_generation_user_prompt(prompt), temperature, max_tokens)

    def validate_workflow(self, workflow: Any, *, temperature: float, max_tokens: int) -> str:
        return self._call_openai(None, build_validation_prompt(workflow), temperature, max_tokens)


# ============================================================================
# Gemini
# ============================================================================

class GeminiProvider(IAProviderStrategy):
    """Provider backed by Google AI Studio (Gemini), JSON response mode."""

    name = "gemini"

    def __init__(self, api_key: Optional[str] = None, model: str = "gemini-1.5-flash", timeout: Optional[float] = None):
        import google.generativeai as genai

        if not api_key:
            raise ValueError("Gemini API key not found. Set GEMINI_API_KEY.")

        genai.configure(api_key=api_key)
        self.model_name = model
        self.model = genai.GenerativeModel(model)
        self.timeout = timeout

    def _call_gemini(self, system_prompt: Optional[str], user_prompt: str, temperature: float, max_tokens: int) -> str:
        # Gemini takes a single prompt here; system and user parts are joined.
        full_prompt = f"{system_prompt}\n\n{user_prompt}" if system_prompt else user_prompt
        request_options = {"timeout": self.timeout} if self.timeout else None

        response = self.model.generate_content(
            full_prompt,
            generation_config={
                "temperature": temperature,
                "max_output_tokens": max_tokens,
                "response_mime_type": "application/json",
            },
            request_options=request_options,
        )
        content = response.text or ""
        logger.debug("Received %d characters from Gemini", len(content))
        return content

    def generate_workflow(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        return self._call_gemini(GENERATION_SYSTEM_PROMPT, build_generation_user_prompt(prompt), temperature, max_tokens)

    def validate_workflow(self, workflow: Any, *, temperature: float, max_tokens: int) -> str:
        return self._call_gemini(None, build_validation_prompt(workflow), temperature, max_tokens)
