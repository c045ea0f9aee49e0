"""
Python client for the flowgen HTTP API.

Works over a `requests.Session` by default; any object with the same
`request(method, url, ...)` shape (e.g. FastAPI's TestClient) can be injected.
"""
import logging
from typing import Any, Dict, List, Optional

import requests

from .errors import AIErrorAnalysis, analyze_ai_error, get_helpful_suggestions
from .recents import RecentWorkflowsCache

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
# A generation makes two sequential model calls, each up to 120 s.
DEFAULT_TIMEOUT = 250.0


class WorkflowApiError(Exception):
    """The API answered with success=false (or not with the envelope at all)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        analysis: Optional[AIErrorAnalysis] = None,
        suggestions: Optional[List[str]] = None,
        ai_response: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.analysis = analysis
        self.suggestions = suggestions or []
        self.ai_response = ai_response

    def chat_message(self) -> str:
        """Assistant-style reply explaining the failure, with suggestions as bullets."""
        friendly = self.analysis.user_friendly_message if self.analysis else self.message
        if not self.suggestions:
            return friendly
        bullets = "\n".join(f"• {s}" for s in self.suggestions)
        return (
            f"{friendly}\n\n"
            f"Here are some suggestions to help you get better results:\n{bullets}\n\n"
            "Feel free to try again with a modified request!"
        )


class WorkflowApiClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Any = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        recents: Optional[RecentWorkflowsCache] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.recents = recents

    def _request(self, method: str, path: str, **kwargs) -> Any:
        if self.timeout is not None:
            kwargs.setdefault("timeout", self.timeout)
        response = self.session.request(method, f"{self.base_url}{path}", **kwargs)

        try:
            body = response.json()
        except ValueError as exc:
            raise WorkflowApiError(
                f"Unexpected response from server (HTTP {response.status_code})",
                status_code=response.status_code,
            ) from exc

        if not isinstance(body, dict) or not body.get("success"):
            if not isinstance(body, dict):
                body = {}
            raise WorkflowApiError(
                body.get("error") or f"Request failed (HTTP {response.status_code})",
                response.status_code,
                ai_response=body.get("aiResponse"),
            )
        return body.get("data")

    # --- Generation ---

    def generate(self, prompt: str, conversation_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Generates a workflow. On success the result is also added to the local
        recents cache when one is configured.

        Raises:
            WorkflowApiError: carries the classifier analysis and suggestions.
        """
        payload: Dict[str, Any] = {"prompt": prompt}
        if conversation_id is not None:
            payload["conversationId"] = conversation_id

        try:
            data = self._request("POST", "/api/generate-workflow", json=payload)
        except WorkflowApiError as exc:
            raise self._with_guidance(exc) from exc
        except requests.RequestException as exc:
            raise self._with_guidance(WorkflowApiError(f"Network error: {exc}")) from exc

        if self.recents is not None:
            workflow = data["workflow"]
            title = workflow.get("name") or " ".join(prompt.split()[:8]) or "Untitled Workflow"
            self.recents.add(title, data["explanation"], workflow)
        return data

    @staticmethod
    def _with_guidance(error: WorkflowApiError) -> WorkflowApiError:
        # Without a raw reply the error text stands in for it.
        ai_response = error.ai_response or error.message
        analysis = analyze_ai_error(error.message, ai_response)
        logger.warning("Generation failed: %s", error.message)
        return WorkflowApiError(
            error.message, error.status_code, analysis, get_helpful_suggestions(analysis), error.ai_response
        )

    def validate(self, workflow: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/validate-workflow", json={"workflow": workflow})

    def analyze(self, workflow: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/analyze-workflow", json={"workflow": workflow})

    # --- Reads ---

    def recent_workflows(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limit} if limit is not None else None
        return self._request("GET", "/api/workflows/recent", params=params)

    def get_workflow(self, workflow_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/workflows/{workflow_id}")

    def get_conversation(self, conversation_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/conversations/{conversation_id}")

    def templates(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"category": category} if category else None
        return self._request("GET", "/api/templates", params=params)

    def get_template(self, template_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/templates/{template_id}")

    def nodes(self, category: Optional[str] = None, search: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {k: v for k, v in (("category", category), ("search", search)) if v}
        return self._request("GET", "/api/nodes", params=params or None)

    def metrics(self) -> Dict[str, Any]:
        return self._request("GET", "/api/ia/metrics")
