"""
Workflow Generation Service
Orchestrates one request: generate, validate, persist, thread the conversation.
"""
import logging
from typing import Any, List, Optional

from ..ia.services import ComplexityAnalyzer
from ..ia_client import IAClient
from ..models import (
    ComplexityAnalysis,
    ConversationRecord,
    GenerationResponse,
    N8nWorkflow,
    TemplateRecord,
    ValidationReport,
    WorkflowCreate,
    WorkflowRecord,
)
from ..repository import DEFAULT_RECENT_LIMIT, WorkflowRepository
from ..util.ids import parse_int_id
from .conversations import ConversationTracker

logger = logging.getLogger(__name__)

TITLE_STOP_WORDS = {"when", "with", "from", "that", "this", "will", "should", "would"}
TITLE_MAX_WORDS = 4
UNTITLED = "Untitled Automation"


def derive_title(prompt: str) -> str:
    """
    Short title from the request: the first four words longer than three
    characters that are not stop-words, first letter capitalised, followed by
    " Automation".

    >>> derive_title("Send me a Slack message when I receive emails from my boss")
    'Send slack message receive Automation'
    """
    keywords = [w for w in prompt.lower().split() if len(w) > 3 and w not in TITLE_STOP_WORDS]
    title = " ".join(keywords[:TITLE_MAX_WORDS])
    if not title:
        return UNTITLED
    return title[0].upper() + title[1:] + " Automation"


class WorkflowGeneratorService:
    def __init__(self, repository: WorkflowRepository, ia_client: IAClient):
        self.repository = repository
        self.ia = ia_client
        self.conversations = ConversationTracker(repository)
        self.complexity = ComplexityAnalyzer()

    def generate(self, prompt: str, conversation_id: Optional[str] = None) -> GenerationResponse:
        """
        Runs the whole pipeline for one request.

        Nothing is stored when generation fails; validation problems are
        advisory and only show up in the suggestions and the report.

        Raises:
            GenerationFailure: the model call or its reply was unusable.
        """
        result = self.ia.generate(prompt)
        validation = self.ia.validate(result.workflow)

        saved = self.repository.create_workflow(WorkflowCreate(
            title=derive_title(prompt),
            description=result.explanation,
            user_prompt=prompt,
            n8n_json=result.workflow,
            node_count=result.node_count,
            integrations=result.integrations,
        ))
        self.ia.subject.notify_generation(saved.id, saved.node_count, saved.integrations)

        thread_id = self._thread_conversation(conversation_id, prompt, result.explanation, saved.id, result.workflow)
        logger.info("Generated workflow %s (%d nodes) in conversation %s", saved.id, saved.node_count, thread_id)

        return GenerationResponse(
            workflow=result.workflow,
            explanation=result.explanation,
            suggestions=result.suggestions + validation.suggestions,
            conversation_id=thread_id,
            workflow_id=saved.id,
            assumptions=result.assumptions,
            pitfalls=result.pitfalls,
            validation=validation,
        )

    def _thread_conversation(
        self,
        conversation_id: Optional[str],
        prompt: str,
        explanation: str,
        workflow_id: int,
        workflow: N8nWorkflow,
    ) -> str:
        turns = [
            self.conversations.user_message(prompt),
            self.conversations.assistant_message(explanation, workflow),
        ]

        existing_id = parse_int_id(conversation_id) if conversation_id else None
        if existing_id is not None and self.conversations.append(existing_id, turns) is not None:
            return str(existing_id)

        if conversation_id:
            logger.info("Conversation %r not found, starting a new one", conversation_id)
        created = self.conversations.create(turns, workflow_id=workflow_id)
        return str(created.id)

    # --- Standalone checks ---

    def validate_workflow(self, workflow: Any) -> ValidationReport:
        return self.ia.validate(workflow)

    def analyze_workflow(self, workflow: N8nWorkflow) -> ComplexityAnalysis:
        return self.complexity.analyze(workflow)

    # --- Reads ---

    def get_recent_workflows(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[WorkflowRecord]:
        return self.repository.get_recent_workflows(limit)

    def get_workflow(self, workflow_id: int) -> Optional[WorkflowRecord]:
        return self.repository.get_workflow(workflow_id)

    def get_conversation(self, conversation_id: int) -> Optional[ConversationRecord]:
        return self.repository.get_conversation(conversation_id)

    def get_templates(self, category: Optional[str] = None) -> List[TemplateRecord]:
        if category:
            return self.repository.get_templates_by_category(category)
        return self.repository.get_templates()

    def get_template(self, template_id: int) -> Optional[TemplateRecord]:
        return self.repository.get_template(template_id)
