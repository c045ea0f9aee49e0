"""
Data Models
n8n workflow shape, persisted records and API DTOs.

All API-facing models serialise with camelCase aliases (userPrompt, n8nJson,
nodeCount, ...) and accept either spelling on input.
"""

from datetime import datetime
from typing import Any, Dict, Generic, List, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from sqlmodel import Field as SQLField
from sqlmodel import SQLModel


# ============================================================================
# DATABASE TABLES (SQLModel backend)
# ============================================================================

class WorkflowTable(SQLModel, table=True):
    """Generated workflows. JSON payloads are stored serialised as text."""
    __tablename__ = "workflows"

    id: Optional[int] = SQLField(default=None, primary_key=True)
    title: str
    description: str
    user_prompt: str
    n8n_json: str
    node_count: int = 0
    integrations: str = "[]"
    created_at: datetime = SQLField(index=True)


class ConversationTable(SQLModel, table=True):
    __tablename__ = "conversations"

    id: Optional[int] = SQLField(default=None, primary_key=True)
    messages: str = "[]"  # JSON list of ChatMessage
    workflow_id: Optional[int] = SQLField(default=None, foreign_key="workflows.id")
    created_at: datetime


class TemplateTable(SQLModel, table=True):
    __tablename__ = "templates"

    id: Optional[int] = SQLField(default=None, primary_key=True)
    name: str
    description: str
    category: str = SQLField(index=True)
    prompt: str
    n8n_json: str
    node_count: int = 0
    integrations: str = "[]"


# ============================================================================
# PYDANTIC MODELS
# ============================================================================

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# n8n WORKFLOW SHAPE
# ============================================================================

class N8nNode(CamelModel):
    """One configured step; unknown keys (typeVersion, notes, ...) are kept."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: Optional[str] = None
    name: str = Field(min_length=1)
    type: str = Field(min_length=1)  # dotted type, e.g. "n8n-nodes-base.slack"
    position: List[Union[int, float]] = Field(default_factory=lambda: [0, 0], min_length=2, max_length=2)
    parameters: Dict[str, Any] = Field(default_factory=dict)
    credentials: Optional[Dict[str, Any]] = None


class N8nConnection(CamelModel):
    node: str
    type: str = "main"
    index: int = 0


class N8nWorkflow(CamelModel):
    """
    Importable n8n workflow.

    connections maps a source node *name* to its output ports ("main"), each
    port holding one list of targets per output index (fan-out = several
    targets in the same inner list).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    nodes: List[N8nNode]
    connections: Dict[str, Dict[str, List[List[N8nConnection]]]] = Field(default_factory=dict)
    active: bool = False
    settings: Dict[str, Any] = Field(default_factory=dict)
    name: Optional[str] = None
    id: Optional[str] = None


# ============================================================================
# RECORDS (owned by the repository)
# ============================================================================

class ChatMessage(CamelModel):
    id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime
    workflow_data: Optional[N8nWorkflow] = None


class WorkflowCreate(CamelModel):
    title: str
    description: str
    user_prompt: str
    n8n_json: N8nWorkflow = Field(alias="n8nJson")  # to_camel would give "n8NJson"
    node_count: int = 0
    integrations: List[str] = Field(default_factory=list)


class WorkflowRecord(WorkflowCreate):
    id: int
    created_at: datetime


class ConversationRecord(CamelModel):
    id: int
    messages: List[ChatMessage] = Field(default_factory=list)
    workflow_id: Optional[int] = None
    created_at: datetime


class TemplateCreate(CamelModel):
    name: str
    description: str
    category: str
    prompt: str
    n8n_json: N8nWorkflow = Field(alias="n8nJson")  # to_camel would give "n8NJson"
    node_count: int = 0
    integrations: List[str] = Field(default_factory=list)


class TemplateRecord(TemplateCreate):
    id: int


class NodeDescriptor(CamelModel):
    """Catalog entry describing one n8n node type."""
    type: str
    name: str
    category: str
    description: str
    parameters: Dict[str, Any] = Field(default_factory=dict)
    credentials: Optional[List[str]] = None
    common_use: List[str] = Field(default_factory=list)


# ============================================================================
# MODEL OUTPUT SCHEMAS
# ============================================================================

class GeneratedPayload(CamelModel):
    """Shape the generation prompt asks the model to return."""
    workflow: N8nWorkflow
    explanation: Optional[str] = None
    assumptions_made: Optional[List[str]] = None
    node_count: Optional[int] = None
    integrations: Optional[List[str]] = None
    suggestions: Optional[List[str]] = None
    potential_pitfalls: Optional[List[str]] = None


class GenerationResult(CamelModel):
    workflow: N8nWorkflow
    explanation: str
    node_count: int
    integrations: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    assumptions: List[str] = Field(default_factory=list)
    pitfalls: List[str] = Field(default_factory=list)


class ValidationPayload(CamelModel):
    valid: Optional[bool] = None
    errors: Optional[List[str]] = None
    suggestions: Optional[List[str]] = None


class ValidationReport(CamelModel):
    valid: bool = False
    errors: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


# ============================================================================
# API DTOs
# ============================================================================

class GenerateWorkflowRequest(CamelModel):
    prompt: str
    conversation_id: Optional[str] = None

    @field_validator("prompt")
    @classmethod
    def _prompt_min_length(cls, value: str) -> str:
        if len(value) < 10:
            raise ValueError("Prompt must be at least 10 characters")
        return value

    @field_validator("conversation_id", mode="before")
    @classmethod
    def _conversation_id_as_str(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class WorkflowBody(CamelModel):
    """Body of the validate/analyze endpoints; `workflow` is checked in the route."""
    workflow: Any = None


class GenerationResponse(CamelModel):
    workflow: N8nWorkflow
    explanation: str
    suggestions: List[str]
    conversation_id: str
    workflow_id: int
    assumptions: List[str] = Field(default_factory=list)
    pitfalls: List[str] = Field(default_factory=list)
    validation: Optional[ValidationReport] = None


class ComplexityFactors(CamelModel):
    node_count: int
    integration_count: int
    conditional_logic: int
    error_handling: int
    data_transformation: int
    async_operations: int


class ComplexityAnalysis(CamelModel):
    score: int
    level: Literal["Simple", "Moderate", "Complex", "Advanced"]
    factors: ComplexityFactors
    estimated_setup_time: str
    skill_level: str
    recommendations: List[str]


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by every endpoint."""
    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None
