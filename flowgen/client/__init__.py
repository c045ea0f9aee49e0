"""
Client-side helpers: HTTP API client, local recents cache and the
generation-error classifier.
"""
from .api import WorkflowApiClient, WorkflowApiError
from .errors import AIErrorAnalysis, analyze_ai_error, get_helpful_suggestions
from .recents import RecentWorkflowsCache, default_recents

__all__ = [
    "WorkflowApiClient",
    "WorkflowApiError",
    "AIErrorAnalysis",
    "analyze_ai_error",
    "get_helpful_suggestions",
    "RecentWorkflowsCache",
    "default_recents",
]
