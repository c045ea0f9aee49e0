from .conversations import ConversationTracker
from .generator import WorkflowGeneratorService, derive_title

__all__ = ["ConversationTracker", "WorkflowGeneratorService", "derive_title"]
