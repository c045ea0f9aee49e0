"""
Conversation threading: the chat history attached to generated workflows.
"""
import threading
from datetime import UTC, datetime
from typing import List, Optional

from ..models import ChatMessage, ConversationRecord, N8nWorkflow
from ..repository import WorkflowRepository
from ..util.ids import new_id


class ConversationTracker:
    # Shared by every tracker: read-extend-replace must not interleave.
    _lock = threading.Lock()

    def __init__(self, repository: WorkflowRepository):
        self.repository = repository

    def append(self, conversation_id: int, new_messages: List[ChatMessage]) -> Optional[ConversationRecord]:
        """Adds messages to an existing conversation; None when the id is unknown."""
        with self._lock:
            current = self.repository.get_conversation(conversation_id)
            if current is None:
                return None
            return self.repository.update_conversation(conversation_id, current.messages + list(new_messages))

    def create(self, messages: List[ChatMessage], workflow_id: Optional[int] = None) -> ConversationRecord:
        return self.repository.create_conversation(list(messages), workflow_id)

    @staticmethod
    def user_message(content: str) -> ChatMessage:
        return ChatMessage(id=new_id("msg_"), role="user", content=content, timestamp=datetime.now(UTC))

    @staticmethod
    def assistant_message(content: str, workflow: Optional[N8nWorkflow] = None) -> ChatMessage:
        return ChatMessage(
            id=new_id("msg_"),
            role="assistant",
            content=content,
            timestamp=datetime.now(UTC),
            workflow_data=workflow,
        )
