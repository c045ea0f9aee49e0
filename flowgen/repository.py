"""
Repository Layer
Id-indexed storage for generated workflows, conversations and templates.

Two interchangeable backends share the `WorkflowRepository` contract. Both are
process-local: a restart drops workflows and conversations, and templates are
seeded again from the static catalog.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, col, create_engine, select

from .data.templates import WORKFLOW_TEMPLATES
from .models import (
    ChatMessage,
    ConversationRecord,
    ConversationTable,
    N8nWorkflow,
    TemplateCreate,
    TemplateRecord,
    TemplateTable,
    WorkflowCreate,
    WorkflowRecord,
    WorkflowTable,
)

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 10


def _now() -> datetime:
    return datetime.now(UTC)


class WorkflowRepository(ABC):
    """Storage contract used by the generation service and the routes."""

    # Workflows
    @abstractmethod
    def create_workflow(self, data: WorkflowCreate) -> WorkflowRecord: ...

    @abstractmethod
    def get_workflow(self, workflow_id: int) -> Optional[WorkflowRecord]: ...

    @abstractmethod
    def get_recent_workflows(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[WorkflowRecord]:
        """Newest first (ties broken by id), at most `limit` items."""

    # Conversations
    @abstractmethod
    def create_conversation(
        self, messages: List[ChatMessage], workflow_id: Optional[int] = None
    ) -> ConversationRecord: ...

    @abstractmethod
    def get_conversation(self, conversation_id: int) -> Optional[ConversationRecord]: ...

    @abstractmethod
    def update_conversation(
        self, conversation_id: int, messages: List[ChatMessage]
    ) -> Optional[ConversationRecord]:
        """Replaces the whole message list; None when the id is unknown."""

    # Templates
    @abstractmethod
    def get_templates(self) -> List[TemplateRecord]: ...

    @abstractmethod
    def get_template(self, template_id: int) -> Optional[TemplateRecord]: ...

    def get_templates_by_category(self, category: str) -> List[TemplateRecord]:
        return [t for t in self.get_templates() if t.category == category]


class InMemoryRepository(WorkflowRepository):
    """Dict-backed store. Id counters start at 1 and advance under a lock."""

    def __init__(self, templates: Iterable[TemplateCreate] = WORKFLOW_TEMPLATES):
        self._lock = threading.Lock()
        self._workflows: Dict[int, WorkflowRecord] = {}
        self._conversations: Dict[int, ConversationRecord] = {}
        self._templates: Dict[int, TemplateRecord] = {}
        self._next_workflow_id = 1
        self._next_conversation_id = 1
        self._next_template_id = 1

        for template in templates:
            with self._lock:
                tid = self._next_template_id
                self._next_template_id += 1
                self._templates[tid] = TemplateRecord(id=tid, **template.model_dump())

    def create_workflow(self, data: WorkflowCreate) -> WorkflowRecord:
        with self._lock:
            wid = self._next_workflow_id
            self._next_workflow_id += 1
            record = WorkflowRecord(id=wid, created_at=_now(), **data.model_dump())
            self._workflows[wid] = record
        return record.model_copy(deep=True)

    def get_workflow(self, workflow_id: int) -> Optional[WorkflowRecord]:
        record = self._workflows.get(workflow_id)
        return record.model_copy(deep=True) if record else None

    def get_recent_workflows(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[WorkflowRecord]:
        with self._lock:
            records = list(self._workflows.values())
        records.sort(key=lambda r: (r.created_at, r.id), reverse=True)
        return [r.model_copy(deep=True) for r in records[:limit]]

    def create_conversation(
        self, messages: List[ChatMessage], workflow_id: Optional[int] = None
    ) -> ConversationRecord:
        with self._lock:
            cid = self._next_conversation_id
            self._next_conversation_id += 1
            record = ConversationRecord(
                id=cid,
                messages=[m.model_copy(deep=True) for m in messages],
                workflow_id=workflow_id,
                created_at=_now(),
            )
            self._conversations[cid] = record
        return record.model_copy(deep=True)

    def get_conversation(self, conversation_id: int) -> Optional[ConversationRecord]:
        record = self._conversations.get(conversation_id)
        return record.model_copy(deep=True) if record else None

    def update_conversation(
        self, conversation_id: int, messages: List[ChatMessage]
    ) -> Optional[ConversationRecord]:
        with self._lock:
            current = self._conversations.get(conversation_id)
            if current is None:
                return None
            # Swap in a new record so readers never see a half-written list.
            updated = current.model_copy(update={"messages": [m.model_copy(deep=True) for m in messages]})
            self._conversations[conversation_id] = updated
        return updated.model_copy(deep=True)

    def get_templates(self) -> List[TemplateRecord]:
        return [t.model_copy(deep=True) for t in self._templates.values()]

    def get_template(self, template_id: int) -> Optional[TemplateRecord]:
        record = self._templates.get(template_id)
        return record.model_copy(deep=True) if record else None


class SQLModelRepository(WorkflowRepository):
    """
    SQLModel-backed store. Ids come from the database autoincrement.

    Every session runs under one lock: the in-memory engine shares a single
    connection between threads.

    The default engine is an in-memory SQLite database shared through a
    StaticPool, so the store is volatile like the in-memory backend.
    """

    def __init__(self, engine: Optional[Engine] = None, templates: Iterable[TemplateCreate] = WORKFLOW_TEMPLATES):
        self.engine = engine or create_memory_engine()
        self._lock = threading.Lock()
        self.create_schema()
        self._seed_templates(templates)

    def create_schema(self):
        """Create all database tables"""
        SQLModel.metadata.create_all(self.engine)

    def _seed_templates(self, templates: Iterable[TemplateCreate]):
        with self._lock, Session(self.engine) as session:
            if session.exec(select(TemplateTable)).first() is not None:
                return
            for template in templates:
                session.add(TemplateTable(
                    name=template.name,
                    description=template.description,
                    category=template.category,
                    prompt=template.prompt,
                    n8n_json=_dump_workflow(template.n8n_json),
                    node_count=template.node_count,
                    integrations=json.dumps(template.integrations),
                ))
            session.commit()

    # --- Workflows ---

    def create_workflow(self, data: WorkflowCreate) -> WorkflowRecord:
        with self._lock, Session(self.engine) as session:
            row = WorkflowTable(
                title=data.title,
                description=data.description,
                user_prompt=data.user_prompt,
                n8n_json=_dump_workflow(data.n8n_json),
                node_count=data.node_count,
                integrations=json.dumps(data.integrations),
                created_at=_now(),
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return _workflow_from_row(row)

    def get_workflow(self, workflow_id: int) -> Optional[WorkflowRecord]:
        with self._lock, Session(self.engine) as session:
            row = session.get(WorkflowTable, workflow_id)
            return _workflow_from_row(row) if row else None

    def get_recent_workflows(self, limit: int = DEFAULT_RECENT_LIMIT) -> List[WorkflowRecord]:
        with self._lock, Session(self.engine) as session:
            rows = session.exec(
                select(WorkflowTable)
                .order_by(col(WorkflowTable.created_at).desc(), col(WorkflowTable.id).desc())
                .limit(limit)
            ).all()
            return [_workflow_from_row(r) for r in rows]

    # --- Conversations ---

    def create_conversation(
        self, messages: List[ChatMessage], workflow_id: Optional[int] = None
    ) -> ConversationRecord:
        with self._lock, Session(self.engine) as session:
            row = ConversationTable(
                messages=_dump_messages(messages),
                workflow_id=workflow_id,
                created_at=_now(),
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return _conversation_from_row(row)

    def get_conversation(self, conversation_id: int) -> Optional[ConversationRecord]:
        with self._lock, Session(self.engine) as session:
            row = session.get(ConversationTable, conversation_id)
            return _conversation_from_row(row) if row else None

    def update_conversation(
        self, conversation_id: int, messages: List[ChatMessage]
    ) -> Optional[ConversationRecord]:
        with self._lock, Session(self.engine) as session:
            row = session.get(ConversationTable, conversation_id)
            if row is None:
                return None
            row.messages = _dump_messages(messages)
            session.add(row)
            session.commit()
            session.refresh(row)
            return _conversation_from_row(row)

    # --- Templates ---

    def get_templates(self) -> List[TemplateRecord]:
        with self._lock, Session(self.engine) as session:
            rows = session.exec(select(TemplateTable).order_by(col(TemplateTable.id))).all()
            return [_template_from_row(r) for r in rows]

    def get_template(self, template_id: int) -> Optional[TemplateRecord]:
        with self._lock, Session(self.engine) as session:
            row = session.get(TemplateTable, template_id)
            return _template_from_row(row) if row else None

    def get_templates_by_category(self, category: str) -> List[TemplateRecord]:
        with self._lock, Session(self.engine) as session:
            rows = session.exec(
                select(TemplateTable).where(TemplateTable.category == category).order_by(col(TemplateTable.id))
            ).all()
            return [_template_from_row(r) for r in rows]


# ============================================================================
# Row <-> record helpers
# ============================================================================

def _dump_workflow(workflow: N8nWorkflow) -> str:
    return json.dumps(workflow.model_dump(mode="json", by_alias=True))


def _dump_messages(messages: List[ChatMessage]) -> str:
    return json.dumps([m.model_dump(mode="json", by_alias=True) for m in messages])


def _as_utc(value: datetime) -> datetime:
    # SQLite hands datetimes back without tzinfo.
    return value if value.tzinfo else value.replace(tzinfo=UTC)


def _workflow_from_row(row: WorkflowTable) -> WorkflowRecord:
    return WorkflowRecord(
        id=row.id,
        title=row.title,
        description=row.description,
        user_prompt=row.user_prompt,
        n8n_json=N8nWorkflow.model_validate(json.loads(row.n8n_json)),
        node_count=row.node_count,
        integrations=json.loads(row.integrations),
        created_at=_as_utc(row.created_at),
    )


def _conversation_from_row(row: ConversationTable) -> ConversationRecord:
    return ConversationRecord(
        id=row.id,
        messages=[ChatMessage.model_validate(m) for m in json.loads(row.messages)],
        workflow_id=row.workflow_id,
        created_at=_as_utc(row.created_at),
    )


def _template_from_row(row: TemplateTable) -> TemplateRecord:
    return TemplateRecord(
        id=row.id,
        name=row.name,
        description=row.description,
        category=row.category,
        prompt=row.prompt,
        n8n_json=N8nWorkflow.model_validate(json.loads(row.n8n_json)),
        node_count=row.node_count,
        integrations=json.loads(row.integrations),
    )


def create_memory_engine(database_url: str = "sqlite://") -> Engine:
    # "sqlite://" + StaticPool keeps ONE live connection, shared by every
    # session and by the threads of the ASGI threadpool.
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )
    return create_engine(database_url, echo=False)


def create_repository(backend: str = "memory", database_url: str = "sqlite://") -> WorkflowRepository:
    """Builds the repository named by STORAGE_BACKEND ("memory" or "sqlite")."""
    backend = backend.lower()
    if backend == "memory":
        return InMemoryRepository()
    if backend == "sqlite":
        logger.info("Using SQLModel repository at %s", database_url)
        return SQLModelRepository(create_memory_engine(database_url))
    raise ValueError(f"Unknown storage backend: {backend}. Valid backends: 'memory', 'sqlite'")
